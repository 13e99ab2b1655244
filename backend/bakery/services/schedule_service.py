"""Admin schedule calendar, capacity controls and bulk date editing."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bakery.core.config import get_settings
from bakery.db.session import storage_guard
from bakery.models.blocked_date import BlockedDate, DateOverrideReason
from bakery.models.booking import Booking, BookingStatus
from bakery.services import availability_service, blocked_date_service, booking_aggregation
from bakery.services.availability_rules import (
    DateStatus,
    coerce_reason,
    remaining_slots,
)
from bakery.services.bulk import apply_to_each, partition
from bakery.services.date_utils import (
    day_bounds_utc,
    iter_dates,
    month_bounds,
    sunday_offset,
)

logger = logging.getLogger(__name__)


class DateSelection:
    """Set of dates picked on the admin calendar.

    Past dates can never be selected; toggling a selected date removes it.
    """

    def __init__(self, today: date) -> None:
        self.today = today
        self._dates: set[date] = set()
        self.rejected: list[date] = []

    @classmethod
    def from_dates(cls, dates: Iterable[date], today: date) -> "DateSelection":
        selection = cls(today)
        for day in dates:
            if day < today:
                if day not in selection.rejected:
                    selection.rejected.append(day)
                continue
            selection._dates.add(day)
        return selection

    def toggle(self, day: date) -> bool:
        """Flip membership of ``day``; returns whether it is now selected."""
        if day < self.today:
            return False
        if day in self._dates:
            self._dates.remove(day)
            return False
        self._dates.add(day)
        return True

    def clear(self) -> None:
        self._dates.clear()

    def __contains__(self, day: object) -> bool:
        return day in self._dates

    def __len__(self) -> int:
        return len(self._dates)

    def sorted(self) -> list[date]:
        return sorted(self._dates)


@dataclass(slots=True)
class DayCell:
    day: date
    status: DateStatus
    reason: DateOverrideReason | None
    capacity: int
    booking_count: int
    remaining_slots: int
    is_today: bool
    bookings: list[Booking] = field(default_factory=list)

    @property
    def selectable(self) -> bool:
        return self.status.is_selectable


@dataclass(slots=True)
class MonthCalendar:
    year: int
    month: int
    today: date
    leading_blanks: int
    days: list[DayCell]


@dataclass(slots=True)
class BulkActionResult:
    action: str
    succeeded: list[date]
    failed: list[tuple[date, str]]
    skipped: list[date]
    message: str


def _build_cells(
    window: availability_service.ScheduleWindow,
    grouped: dict[date, list[Booking]],
    today: date,
) -> list[DayCell]:
    settings = get_settings()
    cells: list[DayCell] = []
    for day in iter_dates(window.start, window.end):
        override = window.overrides.get(day)
        capacity = window.capacity_for(day, settings)
        count = window.counts.get(day, 0)
        cells.append(
            DayCell(
                day=day,
                status=window.status_for(day, today, settings),
                reason=coerce_reason(override.reason) if override is not None else None,
                capacity=capacity,
                booking_count=count,
                remaining_slots=remaining_slots(capacity, count),
                is_today=day == today,
                bookings=grouped.get(day, []),
            )
        )
    return cells


async def _cells_for(
    session: AsyncSession, start: date, end: date, today: date
) -> list[DayCell]:
    overrides = await blocked_date_service.list_blocked_dates(session, start=start, end=end)
    bookings = await booking_aggregation.bookings_in_range(session, start=start, end=end)
    grouped = booking_aggregation.group_by_date(bookings)
    window = availability_service.ScheduleWindow(
        start=start,
        end=end,
        overrides={record.date: record for record in overrides},
        counts={day: len(items) for day, items in grouped.items()},
    )
    return _build_cells(window, grouped, today)


async def build_month_calendar(
    session: AsyncSession, *, year: int, month: int, today: date
) -> MonthCalendar:
    """Sunday-first month grid with derived status per day."""
    first, last = month_bounds(year, month)
    cells = await _cells_for(session, first, last, today)
    return MonthCalendar(
        year=year,
        month=month,
        today=today,
        leading_blanks=sunday_offset(first),
        days=cells,
    )


async def get_day_detail(session: AsyncSession, *, day: date, today: date) -> DayCell:
    """Single-date view used by the mobile detail panel."""
    cells = await _cells_for(session, day, day, today)
    return cells[0]


async def _set_capacity_keep_reason(
    session: AsyncSession, day: date, capacity: int
) -> BlockedDate:
    existing = await blocked_date_service.get_blocked_date(session, day=day)
    reason = coerce_reason(existing.reason) if existing is not None else None
    return await blocked_date_service.upsert_blocked_date(
        session,
        day=day,
        reason=reason or DateOverrideReason.OPEN,
        capacity=capacity,
    )


async def adjust_capacity(
    session: AsyncSession, *, day: date, delta: int, today: date
) -> BlockedDate:
    """Change one date's capacity by ``delta``, never going below zero.

    The existing reason is kept; dates without an override become Open.
    """
    if day < today:
        raise ValueError("Cannot change capacity of a past date")
    settings = get_settings()
    existing = await blocked_date_service.get_blocked_date(session, day=day)
    current = (
        existing.capacity
        if existing is not None and existing.capacity is not None
        else settings.default_daily_capacity
    )
    new_capacity = max(0, current + delta)
    return await _set_capacity_keep_reason(session, day, new_capacity)


def _summary(done: str, failed_note: str, succeeded: int, failed: int) -> str:
    message = done.format(count=succeeded)
    if failed:
        message = f"{message} {failed_note.format(count=failed)}"
    return message


async def _run_bulk(
    sessionmaker: async_sessionmaker[AsyncSession],
    *,
    action: str,
    done: str,
    failed_note: str,
    dates: Iterable[date],
    today: date,
    operation: Callable[[AsyncSession, date], Awaitable[object]],
) -> BulkActionResult:
    selection = DateSelection.from_dates(dates, today)

    async def _one(day: date) -> object:
        # AsyncSession is not safe for concurrent use; one per date.
        async with sessionmaker() as session:
            return await operation(session, day)

    results = await apply_to_each(selection.sorted(), _one)
    succeeded, failed = partition(results)
    selection.clear()
    outcome = BulkActionResult(
        action=action,
        succeeded=[result.key for result in succeeded],
        failed=[(result.key, str(result.error) or type(result.error).__name__) for result in failed],
        skipped=list(selection.rejected),
        message=_summary(done, failed_note, len(succeeded), len(failed)),
    )
    log = logger.warning if failed else logger.info
    log("Bulk %s: %d succeeded, %d failed, %d skipped", action, len(succeeded), len(failed), len(outcome.skipped))
    return outcome


async def bulk_set_status(
    sessionmaker: async_sessionmaker[AsyncSession],
    *,
    dates: Iterable[date],
    reason: DateOverrideReason,
    today: date,
) -> BulkActionResult:
    async def _op(session: AsyncSession, day: date) -> object:
        return await blocked_date_service.upsert_blocked_date(session, day=day, reason=reason)

    return await _run_bulk(
        sessionmaker,
        action="status",
        done=f"Marked {{count}} date(s) as {reason.value}.",
        failed_note="Failed to mark {count} date(s).",
        dates=dates,
        today=today,
        operation=_op,
    )


async def bulk_set_capacity(
    sessionmaker: async_sessionmaker[AsyncSession],
    *,
    dates: Iterable[date],
    capacity: int,
    today: date,
) -> BulkActionResult:
    """Set the same capacity on every date, keeping each date's reason."""
    limit = get_settings().max_bulk_capacity
    if capacity < 0 or capacity > limit:
        raise ValueError(f"Bulk capacity must be between 0 and {limit}")

    async def _op(session: AsyncSession, day: date) -> object:
        return await _set_capacity_keep_reason(session, day, capacity)

    return await _run_bulk(
        sessionmaker,
        action="capacity",
        done=f"Set capacity to {capacity} for {{count}} date(s).",
        failed_note="Failed for {count} date(s).",
        dates=dates,
        today=today,
        operation=_op,
    )


async def bulk_clear(
    sessionmaker: async_sessionmaker[AsyncSession],
    *,
    dates: Iterable[date],
    today: date,
) -> BulkActionResult:
    async def _op(session: AsyncSession, day: date) -> object:
        return await blocked_date_service.delete_blocked_date(session, day=day)

    return await _run_bulk(
        sessionmaker,
        action="clear",
        done="Cleared {count} date(s).",
        failed_note="Failed to clear {count} date(s).",
        dates=dates,
        today=today,
        operation=_op,
    )


async def date_capacity_summary(session: AsyncSession, *, day: date) -> dict[str, object]:
    """How many more orders ``day`` can take, counting one about to be added."""
    settings = get_settings()
    override = await blocked_date_service.get_blocked_date(session, day=day)
    max_per_day = (
        override.capacity
        if override is not None and override.capacity is not None
        else settings.default_daily_capacity
    )
    active = await booking_aggregation.count_active_in_range(session, start=day, end=day)
    lower, upper = day_bounds_utc(day, day, settings.tz)
    async with storage_guard(session, "count_pending_bookings"):
        pending = int(
            (
                await session.execute(
                    select(func.count(Booking.id)).where(
                        Booking.order_date >= lower,
                        Booking.order_date < upper,
                        Booking.status == BookingStatus.PENDING,
                    )
                )
            ).scalar_one()
        )
    total_potential = active + 1
    exceeds = total_potential > max_per_day
    message = None
    if exceeds:
        message = (
            f"You have {active} order{'' if active == 1 else 's'} for this date. "
            f"Adding another makes {total_potential}, which exceeds your "
            f"{max_per_day}/day limit."
        )
    return {
        "date": day,
        "active_bookings": active,
        "pending_bookings": pending,
        "total_potential": total_potential,
        "max_per_day": max_per_day,
        "slots_left": remaining_slots(max_per_day, active),
        "would_exceed_limit": exceeds,
        "message": message,
    }


__all__ = [
    "BulkActionResult",
    "DateSelection",
    "DayCell",
    "MonthCalendar",
    "adjust_capacity",
    "build_month_calendar",
    "bulk_clear",
    "bulk_set_capacity",
    "bulk_set_status",
    "date_capacity_summary",
    "get_day_detail",
]
