"""Admin endpoints for per-date schedule overrides."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bakery.api import deps
from bakery.models.user import User
from bakery.schemas.blocked_date import BlockedDateList, BlockedDateRead, BlockedDateUpsert
from bakery.services import blocked_date_service
from bakery.services.date_utils import parse_override_date

router = APIRouter(prefix="/admin/blocked-dates")


@router.get("", response_model=BlockedDateList, summary="List schedule overrides")
async def list_blocked_dates(
    response: Response,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
) -> BlockedDateList:
    records = await blocked_date_service.list_blocked_dates(session)
    response.headers["Cache-Control"] = "no-store"
    return BlockedDateList(
        blocked_dates=[BlockedDateRead.model_validate(record) for record in records]
    )


@router.post(
    "",
    response_model=BlockedDateRead,
    summary="Create or replace the override for a date",
)
async def upsert_blocked_date(
    payload: BlockedDateUpsert,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
) -> BlockedDateRead:
    try:
        record = await blocked_date_service.upsert_blocked_date(
            session, day=payload.date, reason=payload.reason, capacity=payload.capacity
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return BlockedDateRead.model_validate(record)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove the override for a date",
)
async def delete_blocked_date(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    _admin: Annotated[User, Depends(deps.get_current_admin)],
    day: Annotated[str, Query(alias="date")],
) -> Response:
    await blocked_date_service.delete_blocked_date(
        session, day=parse_override_date(day)
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
