"""Booking endpoints: public checkout plus admin listing and status changes."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bakery.api import deps
from bakery.core.config import get_settings
from bakery.models.user import User
from bakery.schemas.booking import (
    BookingCreate,
    BookingCreated,
    BookingList,
    BookingRead,
    BookingStatusUpdate,
)
from bakery.services import booking_aggregation, booking_service
from bakery.services.booking_service import BookingRejected
from bakery.services.date_utils import parse_calendar_date

router = APIRouter(prefix="/bookings")


@router.post(
    "",
    response_model=BookingCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create a booking",
)
async def create_booking(
    payload: BookingCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[date, Depends(deps.get_business_today)],
) -> BookingCreated:
    try:
        booking = await booking_service.create_booking(session, payload, today=today)
    except BookingRejected as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"reason": exc.reason, "message": str(exc)},
        ) from exc
    return BookingCreated(booking_id=booking.id, order_number=booking.order_number)


@router.get("", response_model=BookingList, summary="List bookings in a date range")
async def list_bookings(
    response: Response,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
    start_date: Annotated[str, Query(alias="startDate")],
    end_date: Annotated[str, Query(alias="endDate")],
    include_cancelled: Annotated[bool, Query(alias="includeCancelled")] = False,
) -> BookingList:
    tz = get_settings().tz
    bookings = await booking_aggregation.bookings_in_range(
        session,
        start=parse_calendar_date(start_date, tz),
        end=parse_calendar_date(end_date, tz),
        include_cancelled=include_cancelled,
    )
    response.headers["Cache-Control"] = "no-store"
    return BookingList(bookings=[BookingRead.from_booking(item) for item in bookings])


@router.patch(
    "/{booking_id}", response_model=BookingRead, summary="Change a booking's status"
)
async def update_booking_status(
    booking_id: uuid.UUID,
    payload: BookingStatusUpdate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
) -> BookingRead:
    try:
        booking = await booking_service.update_booking_status(
            session, booking_id=booking_id, status=payload.status
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return BookingRead.from_booking(booking)
