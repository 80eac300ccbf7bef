"""
Recording of nested timings.

Each execution context (the driver, a thread, a worker process) records into
its own MetricsRecorder. Recorders belong to a MetricsSession, which merges
their mappings, plus any mappings handed back by workers, when a report is
requested. Recording never takes a session-wide lock.
"""

import threading
import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..processors.aggregator import merge_all
from .timer import Timer
from .types import TimingPath


class Clock:
    """Monotonic nanosecond clock. Replace in tests to control durations."""

    def nano_time(self) -> int:
        return time.perf_counter_ns()


class SequenceIdGenerator:
    """Process-wide counter; every allocation is strictly greater than the last."""

    def __init__(self, start: int = 0):
        self._value = start
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            self._value += 1
            return self._value


_SEQUENCE_IDS = SequenceIdGenerator()


def generate_new_sequence_id() -> int:
    """Allocate a new sequence ID for an operation that should appear in its own place in the report."""
    return _SEQUENCE_IDS.next_id()


class MetricsSession:
    """
    One recording session: the set of contributors whose timings end up in a report.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._recorders: List['MetricsRecorder'] = []
        self._contributions: List[Dict[TimingPath, Timer]] = []

    def new_recorder(self, open_paths: Sequence[TimingPath] = ()) -> 'MetricsRecorder':
        """
        Create a recorder that contributes to this session.

        Args:
            open_paths: Enclosing operations, outermost first; new timings are
                        recorded beneath the innermost one

        Returns:
            MetricsRecorder
        """
        recorder = MetricsRecorder(self, open_paths)
        with self._lock:
            self._recorders.append(recorder)
        return recorder

    def contribute(self, timers: Dict[TimingPath, Timer]) -> None:
        """
        Add a finished contributor mapping (e.g. returned by a worker process).

        Args:
            timers: Mapping of TimingPath -> Timer; the session keeps a reference
        """
        with self._lock:
            self._contributions.append(timers)

    def retire(self, recorder: 'MetricsRecorder') -> None:
        """
        Unregister a finished recorder, keeping what it recorded as a contribution.

        Args:
            recorder: Recorder whose thread has finished; retiring it twice is a no-op
        """
        with self._lock:
            if recorder not in self._recorders:
                return
            self._recorders.remove(recorder)
            self._contributions.append(recorder.snapshot())

    def collect(self) -> Dict[TimingPath, Timer]:
        """
        Merge all contributors into one mapping.

        Live recorders may keep recording while this runs; each is read through
        its own snapshot.

        Returns:
            New merged mapping of TimingPath -> Timer
        """
        with self._lock:
            recorders = list(self._recorders)
            contributions = list(self._contributions)
        return merge_all([recorder.snapshot() for recorder in recorders] + contributions)


class MetricsRecorder:
    """Contributor-local timer mapping plus the stack of currently open operations."""

    def __init__(self, session: MetricsSession, open_paths: Sequence[TimingPath] = ()):
        self.session = session
        self._timers: Dict[TimingPath, Timer] = {}
        self._lock = threading.Lock()
        self._stack: List[TimingPath] = list(open_paths)
        # (name, sequence ID) of the last operation opened with no parent
        self._last_top_level: Optional[Tuple[str, int]] = None

    @property
    def current_path(self) -> Optional[TimingPath]:
        return self._stack[-1] if self._stack else None

    def open_paths(self) -> Tuple[TimingPath, ...]:
        return tuple(self._stack)

    def start_phase(self, name: str, sequence_id: Optional[int] = None,
                    is_distributed: bool = False) -> TimingPath:
        """
        Open a new operation beneath the current one.

        The sequence ID is the explicit one if given. Otherwise a distributed
        operation gets a fresh ID, and any other operation shares its parent's
        ID. An operation with no parent gets a fresh ID unless it repeats the
        previous top-level operation's name, in which case it is most likely
        a loop and reuses that ID so the invocations aggregate.

        Args:
            name: Operation label
            sequence_id: Explicit sequence ID
            is_distributed: Whether the operation body may run later and elsewhere

        Returns:
            TimingPath of the new operation
        """
        parent = self.current_path
        if sequence_id is None:
            if is_distributed:
                sequence_id = generate_new_sequence_id()
            elif parent is not None:
                sequence_id = parent.sequence_id
            elif self._last_top_level is not None and self._last_top_level[0] == name:
                sequence_id = self._last_top_level[1]
            else:
                sequence_id = generate_new_sequence_id()
        if parent is None:
            self._last_top_level = (name, sequence_id)
        path = TimingPath(name, sequence_id, parent, is_distributed)
        self._stack.append(path)
        return path

    def finish_phase(self, path: TimingPath, duration: int) -> None:
        """
        Close the innermost operation and record its duration.

        Raises:
            ValueError: if `path` is not the innermost open operation
        """
        self._pop(path)
        self.record(path, duration)

    def discard_phase(self, path: TimingPath) -> None:
        """Close the innermost operation without recording anything."""
        self._pop(path)

    def _pop(self, path: TimingPath) -> None:
        if not self._stack or self._stack[-1] != path:
            current = self._stack[-1].name if self._stack else None
            raise ValueError(
                f"Cannot finish '{path.name}': the innermost open operation is '{current}'"
            )
        self._stack.pop()

    def record(self, path: TimingPath, duration: int) -> None:
        """
        Append one sample to the timer for `path`, creating the timer on first use.

        Args:
            path: TimingPath of the operation
            duration: Elapsed time in nanoseconds
        """
        with self._lock:
            timer = self._timers.get(path)
            if timer is None:
                self._timers[path] = Timer.from_sample(duration)
            else:
                timer.add_sample(duration)

    def snapshot(self) -> Dict[TimingPath, Timer]:
        with self._lock:
            return {path: timer.copy() for path, timer in self._timers.items()}

    def copy(self) -> 'MetricsRecorder':
        """
        Recorder for another thread: same open operations, its own mapping,
        same session. Close it, or use it as a context manager, when the
        thread is done.
        """
        return self.session.new_recorder(self._stack)

    def close(self) -> None:
        """Hand the recorded timings to the session and unregister this recorder."""
        self.session.retire(self)

    def __enter__(self) -> 'MetricsRecorder':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


_CURRENT_RECORDER: ContextVar[Optional[MetricsRecorder]] = ContextVar(
    "timing_analyzer_recorder", default=None
)


def current_recorder() -> Optional[MetricsRecorder]:
    return _CURRENT_RECORDER.get()


def set_current_recorder(recorder: Optional[MetricsRecorder]) -> None:
    _CURRENT_RECORDER.set(recorder)


@contextmanager
def use_recorder(recorder: Optional[MetricsRecorder]) -> Iterator[Optional[MetricsRecorder]]:
    """Make `recorder` current for the duration of the block."""
    token = _CURRENT_RECORDER.set(recorder)
    try:
        yield recorder
    finally:
        _CURRENT_RECORDER.reset(token)


class OperationTimer:
    """
    A named operation that can be timed.

    Records into the explicit recorder if one was given, otherwise into the
    current recorder. When there is neither, timing is skipped and the body
    still runs.
    """

    def __init__(
        self,
        name: str,
        clock: Optional[Clock] = None,
        recorder: Optional[MetricsRecorder] = None,
        sequence_id: Optional[int] = None,
        is_distributed: bool = False
    ):
        self.name = name
        self.clock = clock or Clock()
        self.recorder = recorder
        self.sequence_id = sequence_id
        self.is_distributed = is_distributed

    @contextmanager
    def time(self) -> Iterator[Optional[TimingPath]]:
        recorder = self.recorder if self.recorder is not None else current_recorder()
        if recorder is None:
            yield None
            return

        path = recorder.start_phase(self.name, self.sequence_id, self.is_distributed)
        start = self.clock.nano_time()
        try:
            yield path
        finally:
            recorder.finish_phase(path, self.clock.nano_time() - start)

    def __repr__(self) -> str:
        return f"OperationTimer(name={self.name!r}, is_distributed={self.is_distributed})"
