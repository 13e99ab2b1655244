"""Tests for unavailable-date listing and single-date checks."""

from __future__ import annotations

from datetime import date, time, timedelta

import pytest

from bakery.core.exceptions import InvalidDateError
from bakery.models import BlockedDate, BookingStatus, DateOverrideReason
from bakery.services import availability_service, booking_aggregation

pytestmark = pytest.mark.asyncio

TODAY = date(2025, 6, 1)


async def test_unavailable_dates_cover_every_blocking_status(session, make_booking) -> None:
    session.add_all(
        [
            make_booking(date(2025, 7, 2)),
            make_booking(date(2025, 7, 2), status=BookingStatus.PENDING),
            make_booking(date(2025, 7, 4), status=BookingStatus.CANCELLED),
            make_booking(date(2025, 7, 4), status=BookingStatus.CANCELLED),
            BlockedDate(date=date(2025, 7, 3), reason=DateOverrideReason.AWAY),
        ]
    )
    await session.commit()

    unavailable = await availability_service.list_unavailable_dates(
        session, start=date(2025, 7, 1), end=date(2025, 7, 7), today=TODAY
    )

    assert unavailable == [
        "2025-07-01",
        "2025-07-02",
        "2025-07-03",
        "2025-07-06",
        "2025-07-07",
    ]


async def test_past_and_buffer_dates_unavailable(session) -> None:
    unavailable = await availability_service.list_unavailable_dates(
        session, start=date(2025, 5, 30), end=date(2025, 6, 12), today=TODAY
    )
    assert "2025-05-30" in unavailable
    assert "2025-06-06" in unavailable
    assert "2025-06-10" in unavailable
    assert "2025-06-11" not in unavailable
    assert "2025-06-12" not in unavailable


async def test_open_override_makes_buffer_date_bookable(session) -> None:
    session.add(BlockedDate(date=date(2025, 6, 5), reason=DateOverrideReason.OPEN))
    await session.commit()
    unavailable = await availability_service.list_unavailable_dates(
        session, start=date(2025, 6, 4), end=date(2025, 6, 6), today=TODAY
    )
    assert unavailable == ["2025-06-04", "2025-06-06"]


async def test_late_evening_booking_counts_on_local_date(session, make_booking) -> None:
    # 02:00 UTC on the 5th is 21:00 on the 4th in Chicago.
    session.add_all(
        [
            make_booking(date(2025, 7, 5), at=time(2, 0)),
            make_booking(date(2025, 7, 5), at=time(3, 0)),
        ]
    )
    await session.commit()
    unavailable = await availability_service.list_unavailable_dates(
        session, start=date(2025, 7, 4), end=date(2025, 7, 5), today=TODAY
    )
    assert unavailable == ["2025-07-04"]


async def test_range_validation(session) -> None:
    with pytest.raises(InvalidDateError):
        await availability_service.list_unavailable_dates(
            session, start=date(2025, 7, 5), end=date(2025, 7, 1), today=TODAY
        )
    with pytest.raises(InvalidDateError):
        await availability_service.list_unavailable_dates(
            session,
            start=date(2025, 7, 1),
            end=date(2025, 7, 1) + timedelta(days=186),
            today=TODAY,
        )


async def test_check_reports_each_reason(session, make_booking) -> None:
    session.add_all(
        [
            make_booking(date(2025, 7, 2)),
            make_booking(date(2025, 7, 2)),
            BlockedDate(date=date(2025, 7, 3), reason=DateOverrideReason.CLOSED),
        ]
    )
    await session.commit()

    async def check(day: date):
        return await availability_service.check_date_availability(
            session, day=day, today=TODAY
        )

    assert (await check(date(2025, 5, 20))).reason == "past"
    monday = await check(date(2025, 7, 7))
    assert monday.reason == "closed_day"
    assert "Mondays" in (monday.message or "")
    assert (await check(date(2025, 7, 3))).reason == "closed_day"
    assert (await check(date(2025, 6, 5))).reason == "too_soon"
    assert (await check(date(2025, 7, 2))).reason == "day_full"

    ok = await check(date(2025, 7, 4))
    assert ok.available
    assert ok.slots_left == 2


async def test_weekly_cap(session, make_booking) -> None:
    # Week of Wed 2025-07-02 through Tue 2025-07-08.
    days = [date(2025, 7, 2)] * 4 + [date(2025, 7, 3)] * 4 + [date(2025, 7, 4), date(2025, 7, 5)]
    session.add_all([make_booking(day) for day in days])
    await session.commit()

    assert await booking_aggregation.count_active_in_range(
        session, start=date(2025, 7, 2), end=date(2025, 7, 8)
    ) == 10

    result = await availability_service.check_date_availability(
        session, day=date(2025, 7, 4), today=TODAY
    )
    assert not result.available
    assert result.reason == "week_full"

    next_week = await availability_service.check_date_availability(
        session, day=date(2025, 7, 9), today=TODAY
    )
    assert next_week.available


async def test_open_override_skips_weekly_cap(session, make_booking) -> None:
    days = [date(2025, 7, 2)] * 5 + [date(2025, 7, 3)] * 5
    session.add_all([make_booking(day) for day in days])
    session.add(BlockedDate(date=date(2025, 7, 4), reason=DateOverrideReason.OPEN))
    await session.commit()

    result = await availability_service.check_date_availability(
        session, day=date(2025, 7, 4), today=TODAY
    )
    assert result.available
    assert result.slots_left == 2


async def test_bookings_in_range_excludes_cancelled(session, make_booking) -> None:
    session.add_all(
        [
            make_booking(date(2025, 7, 2)),
            make_booking(date(2025, 7, 2), status=BookingStatus.CANCELLED),
        ]
    )
    await session.commit()

    active = await booking_aggregation.bookings_in_range(
        session, start=date(2025, 7, 2), end=date(2025, 7, 2)
    )
    everything = await booking_aggregation.bookings_in_range(
        session, start=date(2025, 7, 2), end=date(2025, 7, 2), include_cancelled=True
    )
    assert len(active) == 1
    assert len(everything) == 2
    assert booking_aggregation.count_by_date(everything) == {date(2025, 7, 2): 1}


async def test_count_by_date_uses_business_timezone(make_booking) -> None:
    late = make_booking(date(2025, 7, 5), at=time(2, 0))
    assert booking_aggregation.count_by_date([late]) == {date(2025, 7, 4): 1}
