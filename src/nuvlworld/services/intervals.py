"""Date-overlap index over event time intervals.

Answers "which events overlap this local calendar day?" for a calendar
view that asks once per day cell. Every interval is expanded into the
set of local dates it touches, so each question is a dict lookup.

The expansion depends on the time zone, and only one zone is displayed
at a time, so the cache holds exactly one zone. Asking for a different
zone clears and rebuilds it.

Intervals come from two fact forms:

- ``(subAttrOf EVENT (TimeIntervalFn START END))``
- ``(startTime EVENT START)`` with an optional ``(endTime EVENT END)``;
  a start without an end is a point event.

START and END are milliseconds since the Unix epoch (UTC).
"""

import logging
import re
from collections.abc import Hashable, Iterator
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from ..errors import MalformedReferenceError
from ..interfaces import EventTimeInterval, Fact, IFactIndex
from .classifier import INT, TERM

logger = logging.getLogger(__name__)

TIME_INTERVAL_PREDICATE = "subAttrOf"
START_TIME_PREDICATE = "startTime"
END_TIME_PREDICATE = "endTime"

TIME_INTERVAL_PATTERN = re.compile(
    rf"\({TIME_INTERVAL_PREDICATE} ({TERM}) "
    rf"\(TimeIntervalFn ({INT}) ({INT})\)\)",
    re.ASCII,
)
_INT_PATTERN = re.compile(INT, re.ASCII)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
ONE_DAY = timedelta(days=1)

ZoneLike = Union[tzinfo, str]


# -------------------------------------------------------------- #
#  Calendar helpers                                                #
# -------------------------------------------------------------- #


def resolve_zone(zone: ZoneLike) -> tzinfo:
    """Return a tzinfo for an IANA name or pass a tzinfo through.

    Raises:
        zoneinfo.ZoneInfoNotFoundError: For an unknown zone name.
    """
    if isinstance(zone, str):
        return ZoneInfo(zone)
    return zone


def zone_identity(zone: tzinfo) -> Hashable:
    """Value used to compare zones.

    ZoneInfo objects compare by identity, and ``ZoneInfo.no_cache`` can
    produce distinct objects for the same key, so compare by key instead.
    """
    key = getattr(zone, "key", None)
    return key if key is not None else zone


def to_local_datetime(utc_millis: int, zone: tzinfo) -> datetime:
    """Convert epoch millis to an aware datetime in ``zone``."""
    return (EPOCH + timedelta(milliseconds=utc_millis)).astimezone(zone)


def local_date(utc_millis: int, zone: tzinfo) -> date:
    """Calendar date in ``zone`` that contains the instant."""
    return to_local_datetime(utc_millis, zone).date()


def to_utc_millis(zone: ZoneLike, day: date, wall_time: time) -> int:
    """Convert a local date and wall-clock time in ``zone`` to epoch millis."""
    local = datetime.combine(day, wall_time, tzinfo=resolve_zone(zone))
    return (local - EPOCH) // timedelta(milliseconds=1)


def day_bounds_utc_millis(day: date, zone: ZoneLike) -> tuple[int, int]:
    """Epoch millis of local midnight starting ``day`` and the next day."""
    return (
        to_utc_millis(zone, day, time(0)),
        to_utc_millis(zone, day + ONE_DAY, time(0)),
    )


def interval_dates(interval: EventTimeInterval, zone: tzinfo) -> list[date]:
    """Every local date the interval touches, in order.

    - ``end <= start``: only the start date. This also covers the
      unvalidated ``end < start`` case.
    - An end exactly at local midnight closes the previous day, so the
      following day is not included.
    """
    start_date = local_date(interval.start_utc_millis, zone)
    if interval.end_utc_millis <= interval.start_utc_millis:
        end_date = start_date
    else:
        end = to_local_datetime(interval.end_utc_millis, zone)
        end_date = end.date()
        if end.hour == 0 and end.minute == 0 and end.second == 0:
            end_date -= ONE_DAY

    dates = []
    day = start_date
    while True:
        dates.append(day)
        if day >= end_date:
            break
        day += ONE_DAY
    return dates


# -------------------------------------------------------------- #
#  Interval derivation                                             #
# -------------------------------------------------------------- #


def decompose_time_interval(fact: Fact) -> EventTimeInterval:
    """Split a ``subAttrOf ... (TimeIntervalFn START END)`` fact.

    Raises:
        MalformedReferenceError: If the value is not a TimeIntervalFn term.
    """
    match = TIME_INTERVAL_PATTERN.fullmatch(fact.text)
    if match is None:
        raise MalformedReferenceError(
            f"Not a TimeIntervalFn attribute: {fact.text}"
        )
    event, start, end = match.groups()
    return EventTimeInterval(event, int(start), int(end))


def _instant_of(fact: Fact) -> int:
    if not _INT_PATTERN.fullmatch(fact.value):
        raise MalformedReferenceError(
            f"Expected epoch millis in {fact.text}"
        )
    return int(fact.value)


def _start_end_intervals(index: IFactIndex) -> Iterator[EventTimeInterval]:
    ends: dict[str, list[int]] = {}
    for fact in index.facts_by_predicate(END_TIME_PREDICATE):
        try:
            ends.setdefault(fact.arg2, []).append(_instant_of(fact))
        except MalformedReferenceError as exc:
            logger.debug("Skipping %s", exc)

    for fact in index.facts_by_predicate(START_TIME_PREDICATE):
        try:
            start = _instant_of(fact)
        except MalformedReferenceError as exc:
            logger.debug("Skipping %s", exc)
            continue
        for end in ends.get(fact.arg2, [start]):
            yield EventTimeInterval(fact.arg2, start, end)


def derive_intervals(index: IFactIndex) -> set[EventTimeInterval]:
    """Collect all event time intervals declared in the store.

    Facts that do not decompose are skipped; one bad attribute must not
    hide every other event.
    """
    intervals: set[EventTimeInterval] = set()
    for fact in index.facts_by_predicate(TIME_INTERVAL_PREDICATE):
        try:
            intervals.add(decompose_time_interval(fact))
        except MalformedReferenceError as exc:
            logger.debug("Skipping %s", exc)
    intervals.update(_start_end_intervals(index))
    return intervals


# -------------------------------------------------------------- #
#  Cache                                                           #
# -------------------------------------------------------------- #


@dataclass(frozen=True)
class Stale:
    """No cache, or the cache was invalidated."""


@dataclass(frozen=True)
class Built:
    """The cache holds the day mapping for ``zone``."""
    zone: tzinfo

    def is_for(self, zone: tzinfo) -> bool:
        return zone_identity(self.zone) == zone_identity(zone)


CacheState = Union[Stale, Built]


class IntervalIndex:
    """Maps local calendar dates to overlapping event intervals.

    Built lazily on the first query and rebuilt in full whenever a query
    names a different zone than the one the cache was built for.

    Example:
        >>> index = IntervalIndex(store)
        >>> index.overlaps_date(date(2024, 1, 1), "Europe/London")
    """

    def __init__(self, index: IFactIndex):
        self._index = index
        self._state: CacheState = Stale()
        self._by_date: dict[date, set[EventTimeInterval]] = {}
        self.rebuild_count = 0

    @property
    def state(self) -> CacheState:
        return self._state

    @property
    def zone(self) -> Optional[tzinfo]:
        if isinstance(self._state, Built):
            return self._state.zone
        return None

    def invalidate(self) -> None:
        """Drop the cache, e.g. after loading more facts."""
        self._by_date.clear()
        self._state = Stale()

    def overlaps_date(self, day: date, zone: ZoneLike) -> frozenset[EventTimeInterval]:
        """Return the intervals overlapping local date ``day`` in ``zone``.

        Args:
            day: The calendar date.
            zone: tzinfo or IANA zone name. A zone different from the
                cached one clears the cache and rebuilds it.

        Returns:
            The matching intervals, possibly empty.
        """
        zone = resolve_zone(zone)
        if not (isinstance(self._state, Built) and self._state.is_for(zone)):
            self._rebuild(zone)
        return frozenset(self._by_date.get(day, ()))

    def _rebuild(self, zone: tzinfo) -> None:
        # Swapped in whole: on failure the previous cache and state stay intact
        by_date: dict[date, set[EventTimeInterval]] = {}
        intervals = derive_intervals(self._index)
        skipped = 0
        for interval in intervals:
            try:
                days = interval_dates(interval, zone)
            except (OverflowError, ValueError) as exc:
                # Instants outside the datetime range cannot be placed
                logger.debug("Skipping %s: %s", interval, exc)
                skipped += 1
                continue
            for day in days:
                by_date.setdefault(day, set()).add(interval)

        self._by_date = by_date
        self._state = Built(zone)
        self.rebuild_count += 1
        logger.info(
            "Rebuilt date overlap cache for %s: %d intervals over %d dates "
            "(%d skipped)",
            zone_identity(zone), len(intervals) - skipped, len(by_date), skipped,
        )
