"""Testing utilities for Nuvl World."""

from .fixtures import (
    Q1_END,
    Q1_START,
    SAMPLE_FACTS,
    interval_fact,
    load_sample_store,
    utc_millis,
)

__all__ = [
    "Q1_END",
    "Q1_START",
    "SAMPLE_FACTS",
    "interval_fact",
    "load_sample_store",
    "utc_millis",
]
