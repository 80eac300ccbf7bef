"""Report assembly and row definitions."""

from .assembler import ReportAssembler
from .rows import Alignment, ReportRow, ReportTable, TableHeader, TimingReport

__all__ = [
    "ReportAssembler",
    "Alignment",
    "ReportRow",
    "ReportTable",
    "TableHeader",
    "TimingReport",
]
