"""
Unit tests for timing_analyzer.core.timer module.
"""
from timing_analyzer.core.timer import Timer


class TestTimerStatistics:
    """Tests for sample accumulation."""

    def test_empty_timer(self):
        timer = Timer()
        assert timer.count == 0
        assert timer.total_time == 0
        assert timer.min_time is None
        assert timer.max_time is None
        assert timer.mean == 0

    def test_add_samples(self):
        timer = Timer()
        for sample in (30, 10, 20):
            timer.add_sample(sample)
        assert timer.count == 3
        assert timer.total_time == 60
        assert timer.min_time == 10
        assert timer.max_time == 30
        assert timer.mean == 20

    def test_from_sample(self):
        assert Timer.from_sample(7) == Timer(total_time=7, count=1, min_time=7, max_time=7)


class TestTimerMerge:
    """Tests for combining timers from different contributors."""

    def test_two_contributors_same_path(self):
        """Worker A saw 10ns, worker B saw 20ns for the same operation."""
        merged = Timer.from_sample(10).merged(Timer.from_sample(20))
        assert merged.count == 2
        assert merged.total_time == 30
        assert merged.min_time == 10
        assert merged.max_time == 20
        assert merged.mean == 15

    def test_merge_leaves_inputs_untouched(self):
        a = Timer.from_sample(10)
        b = Timer.from_sample(20)
        a.merged(b)
        assert a == Timer.from_sample(10)
        assert b == Timer.from_sample(20)

    def test_merge_with_empty_timer(self):
        timer = Timer(total_time=50, count=2, min_time=20, max_time=30)
        assert timer.merged(Timer()) == timer
        assert Timer().merged(timer) == timer

    def test_copy_is_independent(self):
        timer = Timer.from_sample(5)
        copy = timer.copy()
        copy.add_sample(10)
        assert timer.count == 1
        assert copy.count == 2
