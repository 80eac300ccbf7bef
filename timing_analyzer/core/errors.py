"""
Errors raised while producing timing reports.
"""


class UninitializedRecorder(RuntimeError):
    """Report requested on an execution context where recording was never initialized."""

    def __init__(self, message: str = None):
        super().__init__(
            message or "Trying to print metrics for an uninitialized recorder! "
                       "Call initialize() before printing metrics."
        )


class MissingCorrelatedMonitor(RuntimeError):
    """A report row lacks a statistic that the report pipeline should have attached."""

    def __init__(self, statistic: str, row_name: str):
        self.statistic = statistic
        self.row_name = row_name
        super().__init__(f"Could not find statistic [{statistic}] on row [{row_name}]")
