"""
Report assembly: ordering of the call tree and the distributed-operations table.
"""

from typing import Dict, Iterable, List, Optional, Tuple

from ..core.timer import Timer
from ..core.types import AnalyzerConfig, StageTiming, TimingPath
from ..formatters.time_formatter import format_nanos
from ..processors.hierarchy_builder import HierarchyBuilder, TimingForest, TreeNode
from ..processors.timing_calculator import TimingCalculator
from .rows import (
    COUNT,
    DRIVER_ONLY_TIME,
    DRIVER_TOTAL_TIME,
    MAX,
    MEAN,
    MIN,
    NAME_TAG,
    NEW_STAGE_TAG,
    SEQUENCE_TAG,
    STAGE_DURATION,
    STAGE_ID_TAG,
    TREE_PATH_TAG,
    WORKER_TIME,
    Alignment,
    ReportRow,
    ReportTable,
    TableHeader,
    TimingReport,
    for_statistic,
    for_tag_value_with_key,
)

LAST_BRANCH = "└─ "
BRANCH = "├─ "
LAST_INDENT = "    "
INDENT = "│   "


def create_tree_view_headers() -> List[TableHeader]:
    return [
        TableHeader("Metric", for_tag_value_with_key(TREE_PATH_TAG), alignment=Alignment.LEFT),
        TableHeader("Worker Total", for_statistic(WORKER_TIME), format_nanos),
        TableHeader("Driver Total", for_statistic(DRIVER_TOTAL_TIME), format_nanos),
        TableHeader("Driver Only", for_statistic(DRIVER_ONLY_TIME), format_nanos),
        TableHeader("Count", for_statistic(COUNT)),
        TableHeader("Mean", for_statistic(MEAN), format_nanos),
        TableHeader("Min", for_statistic(MIN), format_nanos),
        TableHeader("Max", for_statistic(MAX), format_nanos),
    ]


def create_distributed_operations_headers() -> List[TableHeader]:
    return [
        TableHeader("Sequence", for_tag_value_with_key(SEQUENCE_TAG), alignment=Alignment.LEFT),
        TableHeader("Operation", for_tag_value_with_key(NAME_TAG), alignment=Alignment.LEFT),
        TableHeader("Is New Stage?", for_tag_value_with_key(NEW_STAGE_TAG), alignment=Alignment.LEFT),
        TableHeader("Stage Duration", for_statistic(STAGE_DURATION), format_nanos),
        TableHeader("Driver Total", for_statistic(DRIVER_TOTAL_TIME), format_nanos),
        TableHeader("Stage ID", for_tag_value_with_key(STAGE_ID_TAG), alignment=Alignment.LEFT),
    ]


def child_sort_key(node: TreeNode) -> Tuple[int, int]:
    """Ascending sequence ID, then largest total time first."""
    return node.timing_path.sequence_id, -node.timer.total_time


class ReportAssembler:
    """Builds the report tables from a merged timer mapping."""

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        """
        Initialize the assembler.

        Args:
            config: AnalyzerConfig; defaults are used when omitted
        """
        self.config = config or AnalyzerConfig()
        self.timing_calculator = TimingCalculator()
        self.hierarchy_builder = HierarchyBuilder(
            self.timing_calculator,
            warn_on_dropped_nodes=self.config.warn_on_dropped_nodes
        )

    def build_report(
        self,
        timers: Dict[TimingPath, Timer],
        stage_timings: Optional[Iterable[StageTiming]] = None
    ) -> TimingReport:
        """
        Build the call-tree table and, if stage timings are given, the
        distributed-operations table.

        Args:
            timers: Merged mapping of TimingPath -> Timer (not modified)
            stage_timings: Optional stage metadata from the execution engine

        Returns:
            TimingReport

        Raises:
            MissingCorrelatedMonitor: if a distributed operation has no driver total
                                      in the call-tree table
        """
        forest = self.hierarchy_builder.build_forest(timers)
        tree_rows, rows_by_path = self.build_tree_rows(forest)
        timings = ReportTable(self.config.timings_title, create_tree_view_headers(), tree_rows)

        distributed = None
        if stage_timings is not None:
            distributed = ReportTable(
                self.config.distributed_title,
                create_distributed_operations_headers(),
                self.build_distributed_rows(timers, stage_timings, rows_by_path)
            )

        return TimingReport(timings, distributed, dropped_count=len(forest.dropped))

    @staticmethod
    def sorted_roots(forest: TimingForest) -> List[TreeNode]:
        return sorted((forest.nodes[i] for i in forest.roots),
                      key=lambda node: node.timing_path.sequence_id)

    @staticmethod
    def sorted_children(forest: TimingForest, node: TreeNode) -> List[TreeNode]:
        return sorted((forest.nodes[i] for i in node.children), key=child_sort_key)

    def build_tree_rows(self, forest: TimingForest) -> Tuple[List[ReportRow], Dict[TimingPath, ReportRow]]:
        """
        Flatten the forest into rows, depth-first pre-order.

        Args:
            forest: TimingForest with adjusted driver times

        Returns:
            Tuple of (rows in display order, mapping TimingPath -> row)
        """
        rows: List[ReportRow] = []
        rows_by_path: Dict[TimingPath, ReportRow] = {}

        # Entries: (node, prefix, in_worker, is_tail)
        stack = [(root, "", False, True) for root in reversed(self.sorted_roots(forest))]
        while stack:
            node, prefix, in_worker, is_tail = stack.pop()
            row = self._tree_row(node, prefix + (LAST_BRANCH if is_tail else BRANCH), in_worker)
            rows.append(row)
            rows_by_path[node.timing_path] = row

            children = self.sorted_children(forest, node)
            child_prefix = prefix + (LAST_INDENT if is_tail else INDENT)
            child_in_worker = in_worker or node.timing_path.is_distributed
            for position in range(len(children) - 1, -1, -1):
                stack.append((children[position], child_prefix, child_in_worker,
                              position == len(children) - 1))

        return rows, rows_by_path

    @staticmethod
    def _tree_row(node: TreeNode, tree_path: str, in_worker: bool) -> ReportRow:
        timer = node.timer
        statistics = {
            WORKER_TIME if in_worker else DRIVER_TOTAL_TIME: timer.total_time,
            COUNT: timer.count,
            MEAN: timer.mean,
        }
        # Only operations that run entirely in the driver get a driver-only total
        if not in_worker and not node.timing_path.is_distributed:
            statistics[DRIVER_ONLY_TIME] = node.adjusted_driver_time
        if timer.min_time is not None:
            statistics[MIN] = timer.min_time
        if timer.max_time is not None:
            statistics[MAX] = timer.max_time

        return ReportRow(
            node.timing_path.name,
            tags={TREE_PATH_TAG: tree_path, NAME_TAG: node.timing_path.name},
            statistics=statistics,
        )

    @staticmethod
    def build_distributed_rows(
        timers: Dict[TimingPath, Timer],
        stage_timings: Iterable[StageTiming],
        rows_by_path: Dict[TimingPath, ReportRow]
    ) -> List[ReportRow]:
        """
        One row per distributed operation in recording order, left-joined by
        name against the supplied stage timings.

        Args:
            timers: Merged mapping of TimingPath -> Timer
            stage_timings: Stage metadata; when names repeat the last one wins
            rows_by_path: Call-tree rows, used for the driver total

        Returns:
            List of rows

        Raises:
            MissingCorrelatedMonitor: if an operation's tree row has no driver total
        """
        operations = sorted((path for path in timers if path.is_distributed),
                            key=lambda path: path.sequence_id)
        stages = {stage.stage_name: stage for stage in stage_timings if stage.stage_name is not None}

        rows = []
        for sequence, path in enumerate(operations, start=1):
            stage = stages.get(path.name)
            tree_row = rows_by_path.get(path)
            if tree_row is None:
                tree_row = ReportRow(path.name)
            tags = {
                NAME_TAG: path.name,
                NEW_STAGE_TAG: "true" if stage is not None else "false",
                SEQUENCE_TAG: str(sequence),
            }
            statistics = {DRIVER_TOTAL_TIME: tree_row.require_statistic(DRIVER_TOTAL_TIME)}
            if stage is not None:
                tags[STAGE_ID_TAG] = str(stage.stage_id)
                statistics[STAGE_DURATION] = stage.duration
            rows.append(ReportRow(path.name, tags=tags, statistics=statistics))
        return rows
