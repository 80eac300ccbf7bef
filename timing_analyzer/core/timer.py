"""
Timer statistics accumulated for one timing path.
"""

from typing import Optional


class Timer:
    """Accumulates duration samples (in nanoseconds) for a single timing path."""

    __slots__ = ('total_time', 'count', 'min_time', 'max_time')

    def __init__(
        self,
        total_time: int = 0,
        count: int = 0,
        min_time: Optional[int] = None,
        max_time: Optional[int] = None
    ):
        self.total_time = total_time
        self.count = count
        self.min_time = min_time
        self.max_time = max_time

    @classmethod
    def from_sample(cls, duration: int) -> 'Timer':
        return cls(total_time=duration, count=1, min_time=duration, max_time=duration)

    @property
    def mean(self) -> float:
        return self.total_time / self.count if self.count else 0

    def add_sample(self, duration: int) -> None:
        """
        Record one invocation.

        Args:
            duration: Elapsed time in nanoseconds
        """
        self.total_time += duration
        self.count += 1
        self.min_time = duration if self.min_time is None else min(self.min_time, duration)
        self.max_time = duration if self.max_time is None else max(self.max_time, duration)

    def merged(self, other: 'Timer') -> 'Timer':
        """
        Combine two timers into a new one, leaving both untouched.

        Args:
            other: Timer observed by another contributor for the same path

        Returns:
            New Timer with summed totals and counts, min of mins and max of maxes
        """
        return Timer(
            total_time=self.total_time + other.total_time,
            count=self.count + other.count,
            min_time=_pick(min, self.min_time, other.min_time),
            max_time=_pick(max, self.max_time, other.max_time),
        )

    def copy(self) -> 'Timer':
        return Timer(self.total_time, self.count, self.min_time, self.max_time)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Timer):
            return NotImplemented
        return (self.total_time == other.total_time
                and self.count == other.count
                and self.min_time == other.min_time
                and self.max_time == other.max_time)

    __hash__ = None

    def __repr__(self) -> str:
        return (f"Timer(total_time={self.total_time}, count={self.count}, "
                f"min_time={self.min_time}, max_time={self.max_time})")


def _pick(fn, a: Optional[int], b: Optional[int]) -> Optional[int]:
    if a is None:
        return b
    if b is None:
        return a
    return fn(a, b)
