"""Liveness of the schedule API and its override store."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from bakery.api import deps
from bakery.core.config import get_settings
from bakery.core.exceptions import StorageError
from bakery.db.session import storage_guard

router = APIRouter()


@router.get("", summary="Service and schedule store health")
async def healthcheck(
    response: Response,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> dict[str, str]:
    """Report 503 while the schedule store cannot answer a trivial query."""
    settings = get_settings()
    store = "ok"
    try:
        async with storage_guard(session, "healthcheck"):
            await session.execute(text("SELECT 1"))
    except StorageError:
        store = "unavailable"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "ok" if store == "ok" else "degraded",
        "service": settings.app_name,
        "store": store,
        "timezone": settings.business_timezone,
        "timestamp": datetime.now(UTC).isoformat(),
        "environment": settings.app_env,
    }
