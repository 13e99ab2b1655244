"""Admin schedule calendar, capacity and bulk editing endpoints."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bakery.api import deps
from bakery.core.config import get_settings
from bakery.core.exceptions import InvalidDateError
from bakery.models.user import User
from bakery.schemas.blocked_date import BlockedDateRead
from bakery.schemas.booking import BookingReschedule, RescheduleResult
from bakery.schemas.schedule import (
    BookingSummary,
    BulkActionRead,
    BulkCapacityRequest,
    BulkDates,
    BulkFailure,
    BulkStatusRequest,
    CapacityAdjust,
    DateCapacityRead,
    DayCellRead,
    MonthCalendarRead,
)
from bakery.services import booking_service, schedule_service
from bakery.services.date_utils import ensure_utc, parse_calendar_date, parse_override_date

router = APIRouter(prefix="/admin")


def _cell_read(cell: schedule_service.DayCell) -> DayCellRead:
    return DayCellRead(
        date=cell.day,
        day=cell.day.day,
        status=cell.status,
        reason=cell.reason,
        capacity=cell.capacity,
        booking_count=cell.booking_count,
        remaining_slots=cell.remaining_slots,
        is_today=cell.is_today,
        selectable=cell.selectable,
        bookings=[BookingSummary.model_validate(item) for item in cell.bookings],
    )


def _bulk_read(result: schedule_service.BulkActionResult) -> BulkActionRead:
    return BulkActionRead(
        action=result.action,
        succeeded=result.succeeded,
        failed=[BulkFailure(date=day, error=error) for day, error in result.failed],
        skipped=result.skipped,
        message=result.message,
    )


@router.get(
    "/schedule/{year}/{month}",
    response_model=MonthCalendarRead,
    summary="Month calendar with per-day status and bookings",
)
async def get_month_calendar(
    year: int,
    month: int,
    response: Response,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[date, Depends(deps.get_business_today)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
) -> MonthCalendarRead:
    calendar = await schedule_service.build_month_calendar(
        session, year=year, month=month, today=today
    )
    response.headers["Cache-Control"] = "no-store"
    return MonthCalendarRead(
        year=calendar.year,
        month=calendar.month,
        today=calendar.today,
        leading_blanks=calendar.leading_blanks,
        days=[_cell_read(cell) for cell in calendar.days],
    )


@router.get(
    "/schedule/days/{day}",
    response_model=DayCellRead,
    summary="Detail for a single date",
)
async def get_day_detail(
    day: str,
    response: Response,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[date, Depends(deps.get_business_today)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
) -> DayCellRead:
    cell = await schedule_service.get_day_detail(
        session, day=parse_override_date(day), today=today
    )
    response.headers["Cache-Control"] = "no-store"
    return _cell_read(cell)


@router.post(
    "/schedule/days/{day}/capacity",
    response_model=BlockedDateRead,
    summary="Raise or lower one date's capacity",
)
async def adjust_capacity(
    day: str,
    payload: CapacityAdjust,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[date, Depends(deps.get_business_today)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
) -> BlockedDateRead:
    target = parse_override_date(day)
    try:
        record = await schedule_service.adjust_capacity(
            session, day=target, delta=payload.delta, today=today
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return BlockedDateRead.model_validate(record)


@router.post(
    "/schedule/bulk/status",
    response_model=BulkActionRead,
    summary="Set the same status on many dates",
)
async def bulk_set_status(
    payload: BulkStatusRequest,
    sessionmaker: Annotated[async_sessionmaker[AsyncSession], Depends(deps.get_db_sessionmaker)],
    today: Annotated[date, Depends(deps.get_business_today)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
) -> BulkActionRead:
    result = await schedule_service.bulk_set_status(
        sessionmaker, dates=payload.dates, reason=payload.reason, today=today
    )
    return _bulk_read(result)


@router.post(
    "/schedule/bulk/capacity",
    response_model=BulkActionRead,
    summary="Set the same capacity on many dates",
)
async def bulk_set_capacity(
    payload: BulkCapacityRequest,
    sessionmaker: Annotated[async_sessionmaker[AsyncSession], Depends(deps.get_db_sessionmaker)],
    today: Annotated[date, Depends(deps.get_business_today)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
) -> BulkActionRead:
    try:
        result = await schedule_service.bulk_set_capacity(
            sessionmaker, dates=payload.dates, capacity=payload.capacity, today=today
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return _bulk_read(result)


@router.post(
    "/schedule/bulk/clear",
    response_model=BulkActionRead,
    summary="Remove overrides from many dates",
)
async def bulk_clear(
    payload: BulkDates,
    sessionmaker: Annotated[async_sessionmaker[AsyncSession], Depends(deps.get_db_sessionmaker)],
    today: Annotated[date, Depends(deps.get_business_today)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
) -> BulkActionRead:
    result = await schedule_service.bulk_clear(
        sessionmaker, dates=payload.dates, today=today
    )
    return _bulk_read(result)


@router.get(
    "/check-date-capacity",
    response_model=DateCapacityRead,
    summary="Capacity check before adding another order",
)
async def check_date_capacity(
    response: Response,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
    day: Annotated[str, Query(alias="date")],
) -> DateCapacityRead:
    summary = await schedule_service.date_capacity_summary(
        session, day=parse_calendar_date(day, get_settings().tz)
    )
    response.headers["Cache-Control"] = "no-store"
    return DateCapacityRead(**summary)


@router.post(
    "/reschedule",
    response_model=RescheduleResult,
    summary="Move a booking to another date",
)
async def reschedule_booking(
    payload: BookingReschedule,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
) -> RescheduleResult:
    try:
        booking = await booking_service.reschedule_booking(
            session,
            booking_id=payload.booking_id,
            new_date=payload.new_date,
            new_time=payload.new_time,
        )
    except InvalidDateError:
        raise
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return RescheduleResult(
        message="Order rescheduled successfully",
        new_date=ensure_utc(booking.order_date),
    )
