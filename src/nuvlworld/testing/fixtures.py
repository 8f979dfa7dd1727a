"""Sample facts and helpers shared by tests."""

from datetime import datetime, timezone

from ..services.fact_store import FactStore

# 2024-01-01T00:00Z to 01:00Z
Q1_START = 1704067200000
Q1_END = 1704070800000

SAMPLE_FACTS = [
    "; sample calendar",
    "",
    "(instanceOf Q1 Meeting)",
    f"(subAttrOf Q1 (TimeIntervalFn {Q1_START} {Q1_END}))",
    '(description Q1 "Team sync")',
    "(startTime e1 1000)",
    "(endTime e1 1000)",
    "(implies Commute LondonWet)",
    "(disjointAttrs LondonWet LondonDry)",
    "(locationIanaTimeZone Q84 Europe_London)",
]


def utc_millis(*args: int) -> int:
    """Epoch millis of a UTC wall-clock time given as datetime fields."""
    return int(datetime(*args, tzinfo=timezone.utc).timestamp()) * 1000


def interval_fact(event: str, start: int, end: int) -> str:
    return f"(subAttrOf {event} (TimeIntervalFn {start} {end}))"


def load_sample_store() -> FactStore:
    store = FactStore()
    store.load_facts(SAMPLE_FACTS)
    return store
