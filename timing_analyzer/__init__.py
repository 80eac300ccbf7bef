"""
Timing Analyzer - hierarchical timing aggregation for driver/worker computations
"""

__version__ = "1.0.0"

from .core.analyzer import TimingAnalyzer
from .core.errors import MissingCorrelatedMonitor, UninitializedRecorder
from .core.metrics import (
    Metrics,
    collect_timers,
    generate_new_sequence_id,
    initialize,
    is_recording,
    print_metrics,
    stop_recording,
)
from .core.recorder import MetricsRecorder, OperationTimer, current_recorder, use_recorder
from .core.timer import Timer
from .core.types import AnalyzerConfig, StageTiming, TimingPath

__all__ = [
    "TimingAnalyzer",
    "AnalyzerConfig",
    "Metrics",
    "MetricsRecorder",
    "OperationTimer",
    "StageTiming",
    "Timer",
    "TimingPath",
    "MissingCorrelatedMonitor",
    "UninitializedRecorder",
    "collect_timers",
    "current_recorder",
    "generate_new_sequence_id",
    "initialize",
    "is_recording",
    "print_metrics",
    "stop_recording",
    "use_recorder",
]
