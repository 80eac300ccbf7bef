"""
Type definitions for timing analysis.
"""

from typing import Any, List, Optional, Tuple, TypedDict


class TimingPath:
    """
    Identity of one recorded timer within the call hierarchy.

    Two paths are equal when they share name, sequence ID and parent path.
    The distributed flag is carried along but is not part of the identity.
    """

    __slots__ = ('name', 'sequence_id', 'parent_path', 'is_distributed', 'depth', '_hash')

    def __init__(
        self,
        name: str,
        sequence_id: int,
        parent_path: Optional['TimingPath'] = None,
        is_distributed: bool = False
    ):
        """
        Initialize a timing path.

        Args:
            name: Operation label
            sequence_id: Recording-order ID shared by siblings created together
            parent_path: Path of the enclosing operation, or None for roots
            is_distributed: True if the operation body may run later and elsewhere
        """
        object.__setattr__(self, 'name', name)
        object.__setattr__(self, 'sequence_id', sequence_id)
        object.__setattr__(self, 'parent_path', parent_path)
        object.__setattr__(self, 'is_distributed', is_distributed)
        object.__setattr__(self, 'depth', 0 if parent_path is None else parent_path.depth + 1)
        # Parent hash is already cached, so this stays O(1) however deep the path is
        parent_hash = 0 if parent_path is None else parent_path._hash
        object.__setattr__(self, '_hash', hash((name, sequence_id, parent_hash)))

    def __setattr__(self, key, value):
        raise AttributeError(f"TimingPath is immutable, cannot set '{key}'")

    def __delattr__(self, key):
        raise AttributeError(f"TimingPath is immutable, cannot delete '{key}'")

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other) -> bool:
        if not isinstance(other, TimingPath):
            return NotImplemented
        # Iterative walk over both parent chains; deep paths must not recurse
        a, b = self, other
        while a is not b:
            if a is None or b is None:
                return False
            if (a._hash != b._hash or a.depth != b.depth
                    or a.name != b.name or a.sequence_id != b.sequence_id):
                return False
            a, b = a.parent_path, b.parent_path
        return True

    def __reduce__(self):
        # Rebuild on unpickle: string hashes are salted per process.
        # The chain is flattened so deep paths do not nest in the pickle.
        segments = [(p.name, p.sequence_id, p.is_distributed) for p in self.ancestry()]
        return (_rebuild_path, (segments,))

    def __repr__(self) -> str:
        return (f"TimingPath(name={self.name!r}, sequence_id={self.sequence_id}, "
                f"depth={self.depth}, is_distributed={self.is_distributed})")

    def ancestry(self) -> List['TimingPath']:
        """
        Return the chain of paths from the root down to this path.

        Returns:
            List of paths, root first, ending with self
        """
        chain = []
        path = self
        while path is not None:
            chain.append(path)
            path = path.parent_path
        chain.reverse()
        return chain


def _rebuild_path(segments: List[Tuple[str, int, bool]]) -> Optional[TimingPath]:
    """Rebuild a path from (name, sequence_id, is_distributed) segments, root first."""
    path = None
    for name, sequence_id, is_distributed in segments:
        path = TimingPath(name, sequence_id, path, is_distributed)
    return path


class StageTiming:
    """Stage metadata reported by an external distributed-execution engine."""

    def __init__(self, stage_name: Optional[str], stage_id: Any, duration: int):
        """
        Initialize stage timing.

        Args:
            stage_name: Name of the operation that triggered the stage, if known
            stage_id: Engine-specific stage identifier
            duration: Stage duration in nanoseconds
        """
        self.stage_name = stage_name
        self.stage_id = stage_id
        self.duration = duration

    def __eq__(self, other) -> bool:
        if not isinstance(other, StageTiming):
            return NotImplemented
        return (self.stage_name, self.stage_id, self.duration) == \
            (other.stage_name, other.stage_id, other.duration)

    __hash__ = None

    def __repr__(self) -> str:
        return (f"StageTiming(stage_name={self.stage_name!r}, stage_id={self.stage_id!r}, "
                f"duration={self.duration})")


class SerializedPathSegment(TypedDict):
    """One element of a serialized timing path (root first)."""
    name: str
    sequence_id: int
    distributed: bool


class SerializedTimer(TypedDict):
    """A single timer entry of a contributor snapshot file."""
    path: List[SerializedPathSegment]
    total_time_ns: int
    count: int
    min_ns: Optional[int]
    max_ns: Optional[int]


class AnalyzerConfig:
    """Configuration for timing analysis."""

    def __init__(
        self,
        num_workers: Optional[int] = None,
        warn_on_dropped_nodes: bool = True,
        timings_title: str = "Timings",
        distributed_title: str = "Distributed Operations"
    ):
        """
        Initialize timing analysis configuration.

        Args:
            num_workers: Number of worker processes for distributed operations.
                         Default: None (use the CPU count)

            warn_on_dropped_nodes: If True, logs a warning when timers whose parent
                                   was never recorded are left out of the tree.
                                   Default: True

            timings_title: Title of the call-tree table

            distributed_title: Title of the distributed-operations table
        """
        self.num_workers = num_workers
        self.warn_on_dropped_nodes = warn_on_dropped_nodes
        self.timings_title = timings_title
        self.distributed_title = distributed_title
