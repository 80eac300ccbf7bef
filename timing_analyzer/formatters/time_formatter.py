"""
Time formatting utilities for human-readable output.
"""

from typing import Optional


def format_nanos(ns: Optional[float]) -> str:
    """
    Format a duration in nanoseconds to a human-readable string.

    Args:
        ns: Duration in nanoseconds. Negative values (over-adjusted driver
            times) keep their sign; None formats as an empty string.

    Returns:
        Formatted time string (e.g., "850 ns", "12.30 µs", "123.45 ms", "2.34 s", "1m 30.50s")
    """
    if ns is None:
        return ""
    if ns < 0:
        return "-" + format_nanos(-ns)
    if ns < 1_000:
        return f"{int(ns)} ns"
    elif ns < 1_000_000:
        return f"{ns / 1_000:.2f} µs"
    elif ns < 1_000_000_000:
        return f"{ns / 1_000_000:.2f} ms"
    elif ns < 60_000_000_000:
        return f"{ns / 1_000_000_000:.2f} s"
    else:
        minutes = int(ns // 60_000_000_000)
        seconds = (ns % 60_000_000_000) / 1_000_000_000
        return f"{minutes}m {seconds:.2f}s"
