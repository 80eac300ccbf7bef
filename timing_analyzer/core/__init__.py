"""Core components for timing analysis."""

from .errors import MissingCorrelatedMonitor, UninitializedRecorder
from .timer import Timer
from .types import AnalyzerConfig, StageTiming, TimingPath

__all__ = [
    "AnalyzerConfig",
    "MissingCorrelatedMonitor",
    "StageTiming",
    "Timer",
    "TimingPath",
    "UninitializedRecorder",
]
