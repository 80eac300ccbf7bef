"""
Aggregator for timer mappings reported by many contributors.
"""

from functools import reduce
from typing import Dict, Iterable

from ..core.timer import Timer
from ..core.types import TimingPath


TimerMap = Dict[TimingPath, Timer]


def merge(a: TimerMap, b: TimerMap) -> TimerMap:
    """
    Merge two contributor mappings into a new mapping.

    Paths present in both mappings have their statistics combined; paths present
    in only one are carried over. Neither input is modified and the result never
    shares Timer objects with them, so live contributor mappings stay private.

    The operation is associative and commutative, so partial results can be
    combined pairwise in any order.

    Args:
        a: First contributor mapping
        b: Second contributor mapping

    Returns:
        Merged mapping of TimingPath -> Timer
    """
    merged = {path: timer.copy() for path, timer in a.items()}
    for path, timer in b.items():
        existing = merged.get(path)
        merged[path] = timer.copy() if existing is None else existing.merged(timer)
    return merged


def merge_all(mappings: Iterable[TimerMap]) -> TimerMap:
    """
    Reduce any number of contributor mappings with merge().

    Args:
        mappings: Contributor mappings, in any order

    Returns:
        Merged mapping (empty if no mappings were given)
    """
    return reduce(merge, mappings, {})
