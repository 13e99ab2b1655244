"""Booking range queries and per-day counts."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import date, tzinfo

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bakery.core.config import get_settings
from bakery.core.exceptions import InvalidDateError
from bakery.db.session import storage_guard
from bakery.models.booking import ACTIVE_BOOKING_STATUSES, Booking, BookingStatus
from bakery.services.date_utils import day_bounds_utc, to_business_date


def _range_filter(
    stmt: Select, start: date, end: date, tz: tzinfo, include_cancelled: bool
) -> Select:
    if start > end:
        raise InvalidDateError("startDate must not be after endDate")
    lower, upper = day_bounds_utc(start, end, tz)
    stmt = stmt.where(Booking.order_date >= lower, Booking.order_date < upper)
    if not include_cancelled:
        stmt = stmt.where(Booking.status.in_(ACTIVE_BOOKING_STATUSES))
    return stmt


async def bookings_in_range(
    session: AsyncSession,
    *,
    start: date,
    end: date,
    include_cancelled: bool = False,
) -> list[Booking]:
    """Bookings whose business-local order date falls in ``[start, end]``.

    Cancelled bookings are left out unless ``include_cancelled`` is set.
    """
    tz = get_settings().tz
    stmt = _range_filter(
        select(Booking).order_by(Booking.order_date.asc()),
        start,
        end,
        tz,
        include_cancelled,
    )
    async with storage_guard(session, "bookings_in_range"):
        result = await session.execute(stmt)
        return list(result.scalars().all())


async def count_active_in_range(session: AsyncSession, *, start: date, end: date) -> int:
    tz = get_settings().tz
    stmt = _range_filter(select(func.count(Booking.id)), start, end, tz, False)
    async with storage_guard(session, "count_active_in_range"):
        return int((await session.execute(stmt)).scalar_one())


def count_by_date(bookings: Iterable[Booking], tz: tzinfo | None = None) -> dict[date, int]:
    """Group non-cancelled bookings by their business-local calendar date."""
    zone = tz or get_settings().tz
    counts: Counter[date] = Counter(
        to_business_date(booking.order_date, zone)
        for booking in bookings
        if booking.status != BookingStatus.CANCELLED
    )
    return dict(counts)


def group_by_date(bookings: Iterable[Booking], tz: tzinfo | None = None) -> dict[date, list[Booking]]:
    zone = tz or get_settings().tz
    grouped: dict[date, list[Booking]] = {}
    for booking in bookings:
        if booking.status == BookingStatus.CANCELLED:
            continue
        grouped.setdefault(to_business_date(booking.order_date, zone), []).append(booking)
    return grouped


__all__ = [
    "bookings_in_range",
    "count_active_in_range",
    "count_by_date",
    "group_by_date",
]
