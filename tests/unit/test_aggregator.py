"""
Unit tests for timing_analyzer.processors.aggregator module.
"""
import pytest
from timing_analyzer.core.timer import Timer
from timing_analyzer.core.types import TimingPath
from timing_analyzer.processors.aggregator import merge, merge_all


ROOT = TimingPath("driver", 1)
TASK = TimingPath("task", 2, ROOT)
OTHER = TimingPath("other", 3, ROOT)


@pytest.fixture
def contributors(timer_factory):
    a = {ROOT: timer_factory(100), TASK: timer_factory(10, 12)}
    b = {TASK: timer_factory(20), OTHER: timer_factory(5)}
    c = {ROOT: timer_factory(1), TASK: timer_factory(3), OTHER: timer_factory(8, 9)}
    return a, b, c


class TestMerge:
    """Tests for the merge algebra."""

    def test_commutative(self, contributors):
        a, b, _ = contributors
        assert merge(a, b) == merge(b, a)

    def test_associative(self, contributors):
        a, b, c = contributors
        assert merge(merge(a, b), c) == merge(a, merge(b, c))

    def test_empty_is_identity(self, contributors):
        a, _, _ = contributors
        assert merge(a, {}) == a
        assert merge({}, a) == a

    def test_shared_path_sums_statistics(self, contributors):
        a, b, _ = contributors
        merged = merge(a, b)
        assert merged[TASK] == Timer(total_time=42, count=3, min_time=10, max_time=20)

    def test_path_in_one_mapping_is_carried_over(self, contributors):
        a, b, _ = contributors
        merged = merge(a, b)
        assert merged[ROOT] == a[ROOT]
        assert merged[OTHER] == b[OTHER]

    def test_inputs_are_not_modified_or_aliased(self, contributors):
        a, b, _ = contributors
        before = {path: timer.copy() for path, timer in a.items()}
        merged = merge(a, b)
        merged[ROOT].add_sample(1)
        assert a == before
        assert merged[ROOT] is not a[ROOT]

    def test_same_contributor_reported_twice(self, timer_factory):
        a = {TASK: timer_factory(10)}
        merged = merge(a, a)
        assert merged[TASK].count == 2
        assert merged[TASK].total_time == 20


class TestMergeAll:
    """Tests for reducing many contributor mappings."""

    def test_no_mappings(self):
        assert merge_all([]) == {}

    def test_order_does_not_matter(self, contributors):
        a, b, c = contributors
        assert merge_all([a, b, c]) == merge_all([c, a, b])

    def test_matches_pairwise_merge(self, contributors):
        a, b, c = contributors
        assert merge_all([a, b, c]) == merge(merge(a, b), c)


class TestDeepPaths:
    """Contributors build their own path objects for the same deep chain."""

    @staticmethod
    def chain(depth):
        path = TimingPath("level-0", 1)
        for level in range(1, depth):
            path = TimingPath(f"level-{level}", 1, path)
        return path

    def test_merge_separately_built_deep_paths(self):
        merged = merge({self.chain(1500): Timer.from_sample(10)},
                       {self.chain(1500): Timer.from_sample(20)})
        assert len(merged) == 1
        (timer,) = merged.values()
        assert timer == Timer(total_time=30, count=2, min_time=10, max_time=20)
