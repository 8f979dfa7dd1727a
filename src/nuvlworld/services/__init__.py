"""nuvlworld service implementations."""

from .classifier import classify_line
from .fact_store import FactStore, from_escaped_string, to_escaped_string
from .intervals import IntervalIndex, derive_intervals, interval_dates
from .scenarios import build_framework_input

__all__ = [
    "classify_line",
    "FactStore",
    "from_escaped_string",
    "to_escaped_string",
    "IntervalIndex",
    "derive_intervals",
    "interval_dates",
    "build_framework_input",
]
