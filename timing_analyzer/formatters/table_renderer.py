"""
Tabular rendering of report tables with rich.
"""

import io
from typing import List, Optional, TextIO

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..report.rows import ReportRow, ReportTable, TableHeader, TimingReport


class TableRenderer:
    """Renders report tables as plain-text boxes to an output stream."""

    def __init__(self, width: Optional[int] = 160):
        """
        Args:
            width: Console width; None lets rich use the terminal width
                   (or 80 columns when writing to a file, which truncates deep trees)
        """
        self.width = width

    def _console(self, out: TextIO) -> Console:
        return Console(
            file=out,
            width=self.width,
            force_terminal=False,
            color_system=None,
            highlight=False,
            soft_wrap=False,
        )

    @staticmethod
    def build_table(title: str, rows: List[ReportRow], headers: List[TableHeader]) -> Table:
        table = Table(title=title, box=box.SIMPLE_HEAD, show_header=True)
        for header in headers:
            table.add_column(header.name, justify=header.alignment.value, no_wrap=True)
        for row in rows:
            # Text() keeps tree glyphs and names free of console markup
            table.add_row(*(Text(header.cell(row)) for header in headers))
        return table

    def render(self, out: TextIO, title: str, rows: List[ReportRow], headers: List[TableHeader]) -> None:
        """
        Print one table to `out`.

        Args:
            out: Output stream
            title: Table title
            rows: Rows in display order
            headers: Column definitions
        """
        self._console(out).print(self.build_table(title, rows, headers))

    def render_table(self, out: TextIO, table: ReportTable) -> None:
        self.render(out, table.title, table.rows, table.headers)

    def render_report(self, out: TextIO, report: TimingReport) -> None:
        """Print every table of a report, separated by a blank line."""
        for table in report.tables():
            self.render_table(out, table)
            out.write("\n")

    def render_to_string(self, report: TimingReport) -> str:
        buffer = io.StringIO()
        self.render_report(buffer, report)
        return buffer.getvalue()
