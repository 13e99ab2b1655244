"""Calendar-date conversions at the I/O boundary.

Calendar dates travel through the services as plain ``datetime.date`` values.
Timestamps are only turned into dates here, after being moved into the
business timezone, so nothing downstream compares wall-clock instants.
"""

from __future__ import annotations

import calendar
import re
from collections.abc import Iterator
from datetime import UTC, date, datetime, time, timedelta, tzinfo

from bakery.core.exceptions import InvalidDateError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_calendar_date(value: object, tz: tzinfo | None = None) -> date:
    """Interpret ``value`` as a calendar date.

    Accepts ``date`` objects, ``datetime`` objects and ISO strings (either a
    bare ``YYYY-MM-DD`` or a full timestamp). Timestamps are converted to
    ``tz`` before the date is taken; naive timestamps are assumed to be UTC.
    """

    if isinstance(value, datetime):
        return to_business_date(value, tz)
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidDateError(f"Invalid date: {value!r}")
    text = value.strip()
    if _ISO_DATE.match(text):
        try:
            return date.fromisoformat(text)
        except ValueError as exc:
            raise InvalidDateError(f"Invalid date: {text!r}") from exc
    return to_business_date(parse_timestamp(text), tz)


def parse_override_date(value: object) -> date:
    """Interpret ``value`` as the date of a schedule override.

    Overrides have always been stored as UTC midnight, so a timestamp names
    its UTC calendar day, not the business-local one.
    """
    return parse_calendar_date(value, UTC)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO timestamp, accepting a trailing ``Z``."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid timestamp: {value!r}") from exc


def normalize_timestamp(value: object, tz: tzinfo) -> datetime:
    """Return ``value`` as an aware UTC datetime.

    Bare dates (objects or ``YYYY-MM-DD`` strings) are pinned to noon in the
    business timezone so that later conversions never drift to a
    neighbouring day.
    """

    if isinstance(value, str):
        text = value.strip()
        if _ISO_DATE.match(text):
            value = parse_calendar_date(text)
        else:
            value = parse_timestamp(text)
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time(12, 0), tzinfo=tz).astimezone(UTC)
    raise InvalidDateError(f"Invalid timestamp: {value!r}")


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_business_date(value: datetime, tz: tzinfo | None = None) -> date:
    """Return the calendar date of ``value`` as seen in the business timezone."""
    aware = ensure_utc(value)
    if tz is not None:
        aware = aware.astimezone(tz)
    return aware.date()


def today_in(tz: tzinfo) -> date:
    return datetime.now(tz).date()


def day_bounds_utc(start: date, end: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Return the UTC instants ``[start 00:00, end+1 00:00)`` in business time."""
    lower = datetime.combine(start, time.min, tzinfo=tz).astimezone(UTC)
    upper = datetime.combine(end + timedelta(days=1), time.min, tzinfo=tz).astimezone(
        UTC
    )
    return lower, upper


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    try:
        first = date(year, month, 1)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid month: {year}-{month}") from exc
    last = date(year, month, calendar.monthrange(year, month)[1])
    return first, last


def sunday_offset(day: date) -> int:
    """Number of blank cells before ``day`` in a Sunday-first week row."""
    return (day.weekday() + 1) % 7


__all__ = [
    "day_bounds_utc",
    "ensure_utc",
    "iter_dates",
    "month_bounds",
    "normalize_timestamp",
    "parse_calendar_date",
    "parse_override_date",
    "parse_timestamp",
    "sunday_offset",
    "to_business_date",
    "today_in",
]
