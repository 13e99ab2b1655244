"""Public availability endpoints used by the storefront calendar."""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bakery.api import deps
from bakery.core.config import get_settings
from bakery.schemas.availability import AvailabilityCheckRead, UnavailableDatesResponse
from bakery.services import availability_service
from bakery.services.date_utils import parse_calendar_date

router = APIRouter()


@router.get(
    "/available-dates",
    response_model=UnavailableDatesResponse,
    summary="Dates customers cannot book in a range",
)
async def get_unavailable_dates(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[date, Depends(deps.get_business_today)],
    start_date: Annotated[str, Query(alias="startDate")],
    end_date: Annotated[str, Query(alias="endDate")],
) -> UnavailableDatesResponse:
    tz = get_settings().tz
    dates = await availability_service.list_unavailable_dates(
        session,
        start=parse_calendar_date(start_date, tz),
        end=parse_calendar_date(end_date, tz),
        today=today,
    )
    return UnavailableDatesResponse(unavailable_dates=dates)


@router.get(
    "/availability/check",
    response_model=AvailabilityCheckRead,
    summary="Check whether a single date can take a booking",
)
async def check_availability(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    today: Annotated[date, Depends(deps.get_business_today)],
    day: Annotated[str, Query(alias="date")],
) -> AvailabilityCheckRead:
    result = await availability_service.check_date_availability(
        session, day=parse_calendar_date(day, get_settings().tz), today=today
    )
    return AvailabilityCheckRead(
        available=result.available,
        reason=result.reason,
        message=result.message,
        slots_left=result.slots_left,
    )
