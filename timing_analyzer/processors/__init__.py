"""Processors for timer mapping aggregation and tree reconstruction."""

from .aggregator import merge, merge_all
from .file_processor import SnapshotFileProcessor
from .hierarchy_builder import HierarchyBuilder, TimingForest, TreeNode
from .timing_calculator import TimingCalculator

# parallel_processor depends on core.recorder, which imports this package;
# import it as timing_analyzer.processors.parallel_processor

__all__ = [
    "merge",
    "merge_all",
    "SnapshotFileProcessor",
    "HierarchyBuilder",
    "TimingForest",
    "TreeNode",
    "TimingCalculator",
]
