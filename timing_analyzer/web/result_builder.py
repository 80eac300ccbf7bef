"""
Result builder for web interface output.
"""

from typing import Any, Dict, List

from ..report.rows import ReportTable, TimingReport


def _table_to_dict(table: ReportTable) -> Dict[str, Any]:
    """
    Convert one report table to raw values and formatted cells.

    Raw values keep numbers as numbers (nanoseconds) so API clients can do their
    own formatting; missing values are None.
    """
    rows: List[Dict[str, Any]] = []
    for row in table.rows:
        rows.append({
            'values': {header.name: header.value(row) for header in table.headers},
            'cells': [header.cell(row) for header in table.headers],
        })
    return {
        'title': table.title,
        'columns': [header.name for header in table.headers],
        'rows': rows,
    }


def prepare_results(report: TimingReport) -> Dict[str, Any]:
    """
    Convert a report to a structured format for JSON output.

    Args:
        report: TimingReport from the analyzer

    Returns:
        Dictionary with structured results for rendering
    """
    timings = _table_to_dict(report.timings)
    distributed = None
    if report.distributed_operations is not None:
        distributed = _table_to_dict(report.distributed_operations)

    return {
        'summary': {
            'total_operations': len(report.timings),
            'distributed_operations': len(report.distributed_operations)
            if report.distributed_operations is not None else None,
            'dropped_timers': report.dropped_count,
        },
        'timings': timings,
        'distributed_operations': distributed,
    }
