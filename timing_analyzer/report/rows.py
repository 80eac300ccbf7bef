"""
Report rows, column headers and value extractors.

A row carries string tags (tree path, sequence, stage ID, ...) and numeric
statistics (driver total, worker total, count, ...). Headers pick one tag or
statistic per column; a value that is not present renders as an empty cell.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from ..core.errors import MissingCorrelatedMonitor

# Tag keys
TREE_PATH_TAG = "TreePath"
NAME_TAG = "Name"
NEW_STAGE_TAG = "IsNewStage"
SEQUENCE_TAG = "Sequence"
STAGE_ID_TAG = "StageId"

# Statistic keys
DRIVER_TOTAL_TIME = "DriverTotalTime"
DRIVER_ONLY_TIME = "DriverOnlyTime"
WORKER_TIME = "WorkerTime"
STAGE_DURATION = "StageDuration"
COUNT = "Count"
MEAN = "Mean"
MIN = "Min"
MAX = "Max"

Value = Union[str, int, float, None]


class Alignment(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class ReportRow:
    """One row of a report table."""

    def __init__(self, name: str, tags: Optional[Dict[str, str]] = None,
                 statistics: Optional[Dict[str, Union[int, float]]] = None):
        self.name = name
        self.tags: Dict[str, str] = dict(tags or {})
        self.statistics: Dict[str, Union[int, float]] = dict(statistics or {})

    def require_statistic(self, key: str) -> Union[int, float]:
        """
        Return a statistic that the pipeline must have attached to this row.

        Raises:
            MissingCorrelatedMonitor: if the statistic is absent
        """
        if key not in self.statistics:
            raise MissingCorrelatedMonitor(key, self.name)
        return self.statistics[key]

    def __repr__(self) -> str:
        return f"ReportRow(name={self.name!r}, tags={self.tags}, statistics={self.statistics})"


ValueExtractor = Callable[[ReportRow], Value]


def for_tag_value_with_key(key: str) -> ValueExtractor:
    return lambda row: row.tags.get(key)


def for_statistic(key: str) -> ValueExtractor:
    return lambda row: row.statistics.get(key)


class TableHeader:
    """A named column backed by a value extractor and an optional formatter."""

    def __init__(
        self,
        name: str,
        value_extractor: ValueExtractor,
        format_function: Optional[Callable[[Any], str]] = None,
        alignment: Alignment = Alignment.RIGHT
    ):
        self.name = name
        self.value_extractor = value_extractor
        self.format_function = format_function
        self.alignment = alignment

    def value(self, row: ReportRow) -> Value:
        return self.value_extractor(row)

    def cell(self, row: ReportRow) -> str:
        value = self.value_extractor(row)
        if value is None:
            return ""
        if self.format_function is not None:
            return self.format_function(value)
        return str(value)


class ReportTable:
    """Title, headers and ordered rows, ready for a tabular renderer."""

    def __init__(self, title: str, headers: List[TableHeader], rows: List[ReportRow]):
        self.title = title
        self.headers = headers
        self.rows = rows

    def cells(self) -> List[List[str]]:
        """Formatted cell text, one list per row, in header order."""
        return [[header.cell(row) for header in self.headers] for row in self.rows]

    def __len__(self) -> int:
        return len(self.rows)


class TimingReport:
    """
    A complete report: the call-tree table plus, when stage timings were
    supplied, the distributed-operations table.
    """

    def __init__(self, timings: ReportTable, distributed_operations: Optional[ReportTable] = None,
                 dropped_count: int = 0):
        self.timings = timings
        self.distributed_operations = distributed_operations
        self.dropped_count = dropped_count

    def tables(self) -> List[ReportTable]:
        tables = [self.timings]
        if self.distributed_operations is not None:
            tables.append(self.distributed_operations)
        return tables
