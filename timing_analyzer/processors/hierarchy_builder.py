"""
Hierarchy builder for merged timer mappings.
"""

from collections import defaultdict
from typing import Dict, List, Optional

from ..core.timer import Timer
from ..core.types import TimingPath
from ..utils.logging_setup import get_logger


logger = get_logger(__name__)

# How many dropped operation names to include in the warning message
_DROPPED_NAMES_IN_WARNING = 5


class TreeNode:
    """One operation in the reconstructed call tree."""

    __slots__ = ('index', 'timing_path', 'timer', 'parent', 'children', 'adjusted_driver_time')

    def __init__(self, index: int, timing_path: TimingPath, timer: Timer, parent: Optional[int]):
        self.index = index
        self.timing_path = timing_path
        self.timer = timer
        self.parent = parent
        self.children: List[int] = []
        self.adjusted_driver_time = timer.total_time

    def __repr__(self) -> str:
        return (f"TreeNode(index={self.index}, name={self.timing_path.name!r}, "
                f"parent={self.parent}, children={self.children}, "
                f"adjusted_driver_time={self.adjusted_driver_time})")


class TimingForest:
    """
    Arena of tree nodes. Parent and child links are indices into `nodes`.
    """

    def __init__(self):
        self.nodes: List[TreeNode] = []
        self.roots: List[int] = []
        self.dropped: List[TimingPath] = []

    def __len__(self) -> int:
        return len(self.nodes)

    def add_node(self, timing_path: TimingPath, timer: Timer, parent: Optional[int] = None) -> int:
        """
        Append a node to the arena and link it to its parent.

        Args:
            timing_path: Path of the operation
            timer: Merged timer for the path
            parent: Arena index of the parent, or None for a root

        Returns:
            Arena index of the new node
        """
        index = len(self.nodes)
        self.nodes.append(TreeNode(index, timing_path, timer, parent))
        if parent is None:
            self.roots.append(index)
        else:
            self.nodes[parent].children.append(index)
        return index

    def ancestors(self, index: int) -> List[int]:
        """Indices of the strict ancestors of a node, nearest first."""
        result = []
        parent = self.nodes[index].parent
        while parent is not None:
            result.append(parent)
            parent = self.nodes[parent].parent
        return result

    def find(self, timing_path: TimingPath) -> Optional[TreeNode]:
        for node in self.nodes:
            if node.timing_path == timing_path:
                return node
        return None


class HierarchyBuilder:
    """Builds a forest of tree nodes from a flat TimingPath -> Timer mapping."""

    def __init__(self, timing_calculator=None, warn_on_dropped_nodes: bool = True):
        """
        Initialize the builder.

        Args:
            timing_calculator: Optional TimingCalculator; when given, ancestors of every
                               distributed node are adjusted as soon as the node is created
            warn_on_dropped_nodes: Log a warning when timers with unknown parents are dropped
        """
        self.timing_calculator = timing_calculator
        self.warn_on_dropped_nodes = warn_on_dropped_nodes

    def build_forest(self, timers: Dict[TimingPath, Timer]) -> TimingForest:
        """
        Build the call tree level by level.

        Every node at depth N is attached to its parent found among the nodes
        created for depth N - 1. A node whose parent was never recorded is
        dropped, together with everything beneath it.

        Args:
            timers: Merged mapping of TimingPath -> Timer

        Returns:
            TimingForest with roots in first-registration order
        """
        forest = TimingForest()

        # Pass 1: partition the paths by depth, keeping insertion order
        by_depth: Dict[int, List[TimingPath]] = defaultdict(list)
        for timing_path in timers:
            by_depth[timing_path.depth].append(timing_path)

        # Pass 2: one forward pass per depth level
        previous_level: Dict[TimingPath, int] = {}
        depth = 0
        while True:
            current_level: Dict[TimingPath, int] = {}
            for timing_path in by_depth.get(depth, []):
                if timing_path.parent_path is None:
                    parent_index = None
                else:
                    parent_index = previous_level.get(timing_path.parent_path)
                    if parent_index is None:
                        forest.dropped.append(timing_path)
                        continue

                index = forest.add_node(timing_path, timers[timing_path], parent_index)
                current_level[timing_path] = index

                if timing_path.is_distributed and self.timing_calculator is not None:
                    self.timing_calculator.subtract_from_ancestors(forest, index)

            if not current_level:
                break
            previous_level = current_level
            depth += 1

        # Anything deeper than the last populated level has no reachable parent
        for level, paths in by_depth.items():
            if level > depth:
                forest.dropped.extend(paths)

        if forest.dropped and self.warn_on_dropped_nodes:
            names = ', '.join(p.name for p in forest.dropped[:_DROPPED_NAMES_IN_WARNING])
            more = len(forest.dropped) - _DROPPED_NAMES_IN_WARNING
            suffix = f" (and {more} more)" if more > 0 else ""
            logger.warning(
                f"Dropped {len(forest.dropped)} timer(s) whose parent was never recorded: "
                f"{names}{suffix}"
            )

        return forest
