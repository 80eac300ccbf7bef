"""
Session lifecycle and metric declarations.

Recording is switched on for an execution context by calling `initialize()`.
After that, timers declared on a `Metrics` subclass record into the context's
recorder. Without `initialize()`, timers run their body and record nothing.
`print_metrics()` is the only call that fails when recording was never
initialized.

Typical usage::

    class Timers(Metrics):
        def __init__(self):
            super().__init__()
            self.load = self.timer("Load input")
            self.shuffle = self.timer("Shuffle", is_distributed=True)

    timers = Timers()
    initialize()
    with timers.load.time():
        ...
    print_metrics(sys.stdout)
"""

import sys
from typing import Dict, Iterable, Optional, TextIO

from ..formatters.table_renderer import TableRenderer
from ..report.assembler import ReportAssembler
from .errors import UninitializedRecorder
from .recorder import (
    Clock,
    MetricsRecorder,
    MetricsSession,
    OperationTimer,
    current_recorder,
    generate_new_sequence_id,
    set_current_recorder,
)
from .timer import Timer
from .types import AnalyzerConfig, StageTiming, TimingPath


class Metrics:
    """
    Base class for an application's collection of timers.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or Clock()

    def timer(self, name: str, is_distributed: bool = False) -> OperationTimer:
        """
        Declare a timer.

        Args:
            name: Operation label shown in the report
            is_distributed: Mark operations whose work runs later or on workers;
                            their time is subtracted from every enclosing operation

        Returns:
            OperationTimer using this collection's clock
        """
        return OperationTimer(name, clock=self.clock, is_distributed=is_distributed)


def initialize() -> MetricsRecorder:
    """
    Start recording for the current execution context, discarding anything
    recorded there before.

    Returns:
        The new recorder (also made current)
    """
    recorder = MetricsSession().new_recorder()
    set_current_recorder(recorder)
    return recorder


def stop_recording() -> None:
    """Stop recording for the current execution context."""
    set_current_recorder(None)


def is_recording() -> bool:
    return current_recorder() is not None


def collect_timers() -> Dict[TimingPath, Timer]:
    """
    Merged timings of every contributor in the current session.

    Raises:
        UninitializedRecorder: if recording was never initialized here
    """
    recorder = current_recorder()
    if recorder is None:
        raise UninitializedRecorder()
    return recorder.session.collect()


def print_metrics(
    out: Optional[TextIO] = None,
    stage_timings: Optional[Iterable[StageTiming]] = None,
    config: Optional[AnalyzerConfig] = None
) -> None:
    """
    Print the timings table and, when stage timings are given, the
    distributed-operations table. The report is fully assembled before
    anything is written.

    Args:
        out: Output stream (default: stdout)
        stage_timings: Optional stage metadata from the execution engine
        config: AnalyzerConfig for titles and diagnostics

    Raises:
        UninitializedRecorder: if recording was never initialized here
        MissingCorrelatedMonitor: if the report pipeline produced an inconsistent row
    """
    timers = collect_timers()
    report = ReportAssembler(config).build_report(timers, stage_timings)
    TableRenderer().render_report(out if out is not None else sys.stdout, report)


__all__ = [
    "Metrics",
    "initialize",
    "stop_recording",
    "is_recording",
    "collect_timers",
    "print_metrics",
    "generate_new_sequence_id",
]
