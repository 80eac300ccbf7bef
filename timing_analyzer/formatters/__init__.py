"""Formatting of durations and report tables."""

from .time_formatter import format_nanos

__all__ = ["format_nanos"]
