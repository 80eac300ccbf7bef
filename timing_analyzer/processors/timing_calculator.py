"""
Timing calculator for tree nodes.
"""


class TimingCalculator:
    """
    Corrects driver-side totals for time spent in distributed operations.

    A distributed operation may run lazily or on workers while its logical
    ancestors are still timing, so the ancestors' raw totals also contain the
    distributed time. Subtracting it leaves the time each ancestor spent in its
    own logic. Results are not clamped and can be negative when concurrent
    sub-timers overlap.
    """

    @staticmethod
    def subtract_from_ancestors(forest, index: int) -> None:
        """
        Subtract a distributed node's total from every strict ancestor.

        Args:
            forest: TimingForest holding the node (modified in-place)
            index: Arena index of the distributed node
        """
        total_time = forest.nodes[index].timer.total_time
        for ancestor in forest.ancestors(index):
            forest.nodes[ancestor].adjusted_driver_time -= total_time

    def adjust(self, forest) -> None:
        """
        Recompute adjusted driver times for a whole forest.

        Adjusted times are reset to the raw totals first, so calling this more
        than once gives the same result.

        Args:
            forest: TimingForest (modified in-place)
        """
        for node in forest.nodes:
            node.adjusted_driver_time = node.timer.total_time

        for node in forest.nodes:
            if node.timing_path.is_distributed:
                self.subtract_from_ancestors(forest, node.index)
