"""Pure date status and capacity rules.

Status is derived by walking an ordered rule list; the first rule that
returns a status wins. Nothing here touches the database or the clock.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Collection
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Protocol

from bakery.core.exceptions import InvalidDateError
from bakery.models.blocked_date import DateOverrideReason
from bakery.services.date_utils import parse_calendar_date

DEFAULT_DAILY_CAPACITY = 2
BUFFER_DAYS = 10
# Sunday, Monday, Tuesday (``date.weekday()`` numbering).
CLOSED_WEEKDAYS: frozenset[int] = frozenset({6, 0, 1})


class DateStatus(str, enum.Enum):
    """Derived availability of a calendar date."""

    PAST = "past"
    AVAILABLE = "available"
    FULL = "full"
    BUFFER = "buffer"
    CLOSED = "closed"
    AWAY = "away"

    @property
    def is_unavailable(self) -> bool:
        """Closed by the owner, either by weekday or manual override."""
        return self in {DateStatus.CLOSED, DateStatus.AWAY}

    @property
    def blocks_booking(self) -> bool:
        return self is not DateStatus.AVAILABLE

    @property
    def is_selectable(self) -> bool:
        return self is not DateStatus.PAST


class OverrideRecord(Protocol):
    reason: DateOverrideReason | str | None
    capacity: int | None


@dataclass(slots=True, frozen=True)
class DateContext:
    """Everything the rules need to know about one date."""

    day: date
    today: date
    reason: DateOverrideReason | None
    capacity: int
    booking_count: int
    buffer_days: int
    closed_weekdays: Collection[int]

    @property
    def in_buffer(self) -> bool:
        return self.today <= self.day < self.today + timedelta(days=self.buffer_days)

    @property
    def on_closed_weekday(self) -> bool:
        return self.day.weekday() in self.closed_weekdays

    @property
    def has_room(self) -> bool:
        return self.booking_count < self.capacity


Rule = Callable[[DateContext], DateStatus | None]


def _past(ctx: DateContext) -> DateStatus | None:
    return DateStatus.PAST if ctx.day < ctx.today else None


def _opened(ctx: DateContext) -> DateStatus | None:
    # Skips the weekday and buffer rules; the capacity limit still holds.
    if ctx.reason is DateOverrideReason.OPEN:
        return DateStatus.AVAILABLE if ctx.has_room else DateStatus.FULL
    return None


def _away(ctx: DateContext) -> DateStatus | None:
    return DateStatus.AWAY if ctx.reason is DateOverrideReason.AWAY else None


def _closed(ctx: DateContext) -> DateStatus | None:
    if ctx.reason is DateOverrideReason.CLOSED or ctx.on_closed_weekday:
        return DateStatus.CLOSED
    return None


def _buffer(ctx: DateContext) -> DateStatus | None:
    return DateStatus.BUFFER if ctx.in_buffer else None


def _capacity(ctx: DateContext) -> DateStatus:
    return DateStatus.AVAILABLE if ctx.has_room else DateStatus.FULL


STATUS_RULES: tuple[Rule, ...] = (_past, _opened, _away, _closed, _buffer, _capacity)


def _as_date(value: object) -> date:
    if isinstance(value, datetime):
        raise InvalidDateError("Expected a calendar date, got a timestamp")
    return parse_calendar_date(value)


def coerce_reason(value: DateOverrideReason | str | None) -> DateOverrideReason | None:
    """Map stored reason strings onto the enum; unknown text counts as Closed."""
    if value is None or isinstance(value, DateOverrideReason):
        return value
    try:
        return DateOverrideReason(value)
    except ValueError:
        return DateOverrideReason.CLOSED


def effective_capacity(
    blocked: OverrideRecord | None, default_capacity: int = DEFAULT_DAILY_CAPACITY
) -> int:
    """Capacity override for the date if set, else the default."""
    if blocked is not None and blocked.capacity is not None:
        return blocked.capacity
    return default_capacity


def remaining_slots(capacity: int, booking_count: int) -> int:
    return max(0, capacity - booking_count)


def compute_status(
    day: date,
    today: date,
    blocked: OverrideRecord | None = None,
    booking_count: int = 0,
    default_capacity: int = DEFAULT_DAILY_CAPACITY,
    buffer_days: int = BUFFER_DAYS,
    closed_weekdays: Collection[int] = CLOSED_WEEKDAYS,
) -> DateStatus:
    """Derive the status of ``day`` as seen on ``today``.

    ``day`` and ``today`` may be dates or ISO ``YYYY-MM-DD`` strings; anything
    else raises ``InvalidDateError``.
    """
    day = _as_date(day)
    today = _as_date(today)
    ctx = DateContext(
        day=day,
        today=today,
        reason=coerce_reason(blocked.reason) if blocked is not None else None,
        capacity=effective_capacity(blocked, default_capacity),
        booking_count=booking_count,
        buffer_days=buffer_days,
        closed_weekdays=closed_weekdays,
    )
    for rule in STATUS_RULES:
        status = rule(ctx)
        if status is not None:
            return status
    raise AssertionError("capacity rule always returns a status")  # pragma: no cover


__all__ = [
    "BUFFER_DAYS",
    "CLOSED_WEEKDAYS",
    "DEFAULT_DAILY_CAPACITY",
    "DateStatus",
    "OverrideRecord",
    "STATUS_RULES",
    "coerce_reason",
    "compute_status",
    "effective_capacity",
    "remaining_slots",
]
