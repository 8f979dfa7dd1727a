"""Nuvl World: a triple fact store with a calendar date-overlap index."""

__version__ = "0.1.0"

from .errors import (
    NuvlWorldError,
    FactSyntaxError,
    LoadError,
    MalformedReferenceError,
    ConfigError,
)
from .interfaces import EventTimeInterval, Fact, FactShape, LoadSummary
from .services import FactStore, IntervalIndex, classify_line

__all__ = [
    "NuvlWorldError",
    "FactSyntaxError",
    "LoadError",
    "MalformedReferenceError",
    "ConfigError",
    "EventTimeInterval",
    "Fact",
    "FactShape",
    "LoadSummary",
    "FactStore",
    "IntervalIndex",
    "classify_line",
]
