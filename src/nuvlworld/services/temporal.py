"""Resolution of user-entered date expressions to calendar dates.

The display API and CLI accept either ISO dates ("2024-01-01") or
natural language ("today", "next monday", "May 7, 2023"). Relative
expressions are resolved against "now" in the display time zone.

Uses dateparser for everything that is not a plain ISO date.
"""

import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional, Union

import dateparser

logger = logging.getLogger(__name__)

WEEKDAYS = (
    "monday", "tuesday", "wednesday", "thursday",
    "friday", "saturday", "sunday",
)


def resolve_date(
    expression: str,
    zone: tzinfo,
    reference: Optional[datetime] = None,
) -> date:
    """Resolve a date expression to a calendar date.

    Args:
        expression: ISO date or natural-language expression.
        zone: Zone whose "today" relative expressions refer to.
        reference: Reference datetime. Defaults to now in ``zone``.

    Returns:
        The resolved date.

    Raises:
        ValueError: If the expression cannot be resolved.
    """
    text = expression.strip()
    if not text:
        raise ValueError("Empty date expression")

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    if reference is None:
        reference = datetime.now(zone)
    elif reference.tzinfo is not None:
        reference = reference.astimezone(zone)

    settings = {
        # dateparser expects a naive wall-clock base
        'RELATIVE_BASE': reference.replace(tzinfo=None),
        'PREFER_DATES_FROM': 'current_period',
    }
    parsed = dateparser.parse(text, settings=settings)
    if parsed is None:
        raise ValueError(f"Unrecognized date expression: {expression!r}")

    logger.debug("Resolved %r to %s", expression, parsed.date())
    return parsed.date()


def weekday_index(start_of_week: Union[str, int]) -> int:
    """Monday-based index (0-6) of a weekday name or index."""
    if isinstance(start_of_week, int):
        if not 0 <= start_of_week <= 6:
            raise ValueError(f"Weekday index out of range: {start_of_week}")
        return start_of_week
    name = start_of_week.strip().lower()
    if name not in WEEKDAYS:
        raise ValueError(f"Unknown weekday: {start_of_week!r}")
    return WEEKDAYS.index(name)


def week_dates(day: date, start_of_week: Union[str, int] = "monday") -> list[date]:
    """The seven dates of the week containing ``day``."""
    offset = (day.weekday() - weekday_index(start_of_week)) % 7
    first = day - timedelta(days=offset)
    return [first + timedelta(days=i) for i in range(7)]
