"""Customer-facing availability queries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from bakery.core.config import Settings, get_settings
from bakery.core.exceptions import InvalidDateError
from bakery.models.blocked_date import BlockedDate, DateOverrideReason
from bakery.services import blocked_date_service, booking_aggregation
from bakery.services.availability_rules import (
    DateStatus,
    coerce_reason,
    compute_status,
    effective_capacity,
    remaining_slots,
)
from bakery.services.date_utils import iter_dates

logger = logging.getLogger(__name__)

_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


@dataclass(slots=True)
class ScheduleWindow:
    """Overrides and active booking counts for a span of dates."""

    start: date
    end: date
    overrides: dict[date, BlockedDate]
    counts: dict[date, int]

    def status_for(self, day: date, today: date, settings: Settings) -> DateStatus:
        return compute_status(
            day,
            today,
            self.overrides.get(day),
            self.counts.get(day, 0),
            default_capacity=settings.default_daily_capacity,
            buffer_days=settings.buffer_days,
            closed_weekdays=settings.closed_weekdays,
        )

    def capacity_for(self, day: date, settings: Settings) -> int:
        return effective_capacity(self.overrides.get(day), settings.default_daily_capacity)


@dataclass(slots=True, frozen=True)
class AvailabilityResult:
    """Answer to "can a customer book this date?"."""

    available: bool
    reason: str | None = None
    message: str | None = None
    slots_left: int | None = None


def _validate_range(start: date, end: date, settings: Settings) -> None:
    if start > end:
        raise InvalidDateError("startDate must not be after endDate")
    if (end - start).days + 1 > settings.max_query_days:
        raise InvalidDateError(
            f"Date range cannot exceed {settings.max_query_days} days"
        )


async def load_window(session: AsyncSession, *, start: date, end: date) -> ScheduleWindow:
    """Fetch overrides and active bookings for ``[start, end]``."""
    overrides = await blocked_date_service.list_blocked_dates(
        session, start=start, end=end
    )
    bookings = await booking_aggregation.bookings_in_range(session, start=start, end=end)
    return ScheduleWindow(
        start=start,
        end=end,
        overrides={record.date: record for record in overrides},
        counts=booking_aggregation.count_by_date(bookings),
    )


async def list_unavailable_dates(
    session: AsyncSession,
    *,
    start: date,
    end: date,
    today: date,
) -> list[str]:
    """ISO dates in ``[start, end]`` the booking calendar must disable."""
    settings = get_settings()
    _validate_range(start, end, settings)
    window = await load_window(session, start=start, end=end)
    unavailable = [
        day.isoformat()
        for day in iter_dates(start, end)
        if window.status_for(day, today, settings).blocks_booking
    ]
    logger.debug(
        "Computed %d unavailable dates between %s and %s", len(unavailable), start, end
    )
    return unavailable


def _week_bounds(day: date) -> tuple[date, date]:
    # Weeks run Wednesday through Tuesday around the Sun-Tue closure.
    offset = (day.weekday() - 2) % 7
    wednesday = day - timedelta(days=offset)
    return wednesday, wednesday + timedelta(days=6)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


async def check_date_availability(
    session: AsyncSession, *, day: date, today: date
) -> AvailabilityResult:
    """Full booking check for a single date, including the weekly cap."""
    settings = get_settings()
    window = await load_window(session, start=day, end=day)
    status = window.status_for(day, today, settings)
    capacity = window.capacity_for(day, settings)
    count = window.counts.get(day, 0)

    if status is DateStatus.PAST:
        return AvailabilityResult(
            available=False, reason="past", message="That date has already passed."
        )
    override = window.overrides.get(day)
    reason = coerce_reason(override.reason) if override is not None else None

    if status is DateStatus.CLOSED and reason is None:
        return AvailabilityResult(
            available=False,
            reason="closed_day",
            message=f"Sorry, we're closed on {_DAY_NAMES[day.weekday()]}s.",
        )
    if status.is_unavailable:
        return AvailabilityResult(
            available=False,
            reason="closed_day",
            message="Sorry, this date is not available.",
        )
    if status is DateStatus.BUFFER:
        earliest = today + timedelta(days=settings.buffer_days)
        return AvailabilityResult(
            available=False,
            reason="too_soon",
            message=(
                f"We need at least {settings.buffer_days} days advance notice. "
                f"The earliest available date is {earliest.isoformat()}."
            ),
        )
    if status is DateStatus.FULL:
        return AvailabilityResult(
            available=False,
            reason="day_full",
            message=(
                f"That date is fully booked ({_plural(capacity, 'cake')} maximum per day). "
                "Please choose another date."
            ),
        )

    # Manually opened dates skip the weekly cap.
    if reason is not DateOverrideReason.OPEN:
        week_start, week_end = _week_bounds(day)
        week_count = await booking_aggregation.count_active_in_range(
            session, start=week_start, end=week_end
        )
        if week_count >= settings.weekly_capacity:
            return AvailabilityResult(
                available=False,
                reason="week_full",
                message=(
                    f"That week is fully booked ({settings.weekly_capacity} cakes maximum "
                    "per week). Please choose a date in another week."
                ),
            )

    slots = remaining_slots(capacity, count)
    return AvailabilityResult(
        available=True,
        slots_left=slots,
        message=f"{day.isoformat()} is available! {_plural(slots, 'slot')} remaining for that day.",
    )


__all__ = [
    "AvailabilityResult",
    "ScheduleWindow",
    "check_date_availability",
    "list_unavailable_dates",
    "load_window",
]
