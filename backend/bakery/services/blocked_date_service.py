"""Persistence of per-date schedule overrides."""
from __future__ import annotations

import logging
from datetime import UTC, date, datetime

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bakery.db.session import storage_guard
from bakery.models.blocked_date import BlockedDate, DateOverrideReason

logger = logging.getLogger(__name__)


async def list_blocked_dates(
    session: AsyncSession,
    *,
    start: date | None = None,
    end: date | None = None,
) -> list[BlockedDate]:
    """Return overrides ordered by date, optionally limited to ``[start, end]``."""
    stmt: Select[tuple[BlockedDate]] = select(BlockedDate).order_by(
        BlockedDate.date.asc()
    )
    if start is not None:
        stmt = stmt.where(BlockedDate.date >= start)
    if end is not None:
        stmt = stmt.where(BlockedDate.date <= end)
    async with storage_guard(session, "list_blocked_dates"):
        result = await session.execute(stmt)
        return list(result.scalars().all())


async def _select_for_day(session: AsyncSession, day: date) -> BlockedDate | None:
    result = await session.execute(select(BlockedDate).where(BlockedDate.date == day))
    return result.scalar_one_or_none()


async def get_blocked_date(session: AsyncSession, *, day: date) -> BlockedDate | None:
    async with storage_guard(session, "get_blocked_date"):
        return await _select_for_day(session, day)


async def upsert_blocked_date(
    session: AsyncSession,
    *,
    day: date,
    reason: DateOverrideReason,
    capacity: int | None = None,
) -> BlockedDate:
    """Create or replace the override for ``day``.

    ``capacity`` replaces the stored value when given and is left untouched
    when omitted. Concurrent writers to the same date are last-write-wins.
    """
    if capacity is not None and capacity < 0:
        raise ValueError("Capacity cannot be negative")
    async with storage_guard(session, "upsert_blocked_date"):
        existing = await _select_for_day(session, day)
        if existing is None:
            record = BlockedDate(date=day, reason=reason, capacity=capacity)
            session.add(record)
            try:
                await session.commit()
            except IntegrityError:
                # Another writer created the row first; overwrite it below.
                await session.rollback()
                existing = await _select_for_day(session, day)
                if existing is None:
                    raise
                logger.info("Override for %s created concurrently; updating", day)
            else:
                await session.refresh(record)
                logger.info("Created %s override for %s (capacity=%s)", reason.value, day, capacity)
                return record

        previous = existing.reason
        existing.reason = reason
        if capacity is not None:
            existing.capacity = capacity
        existing.created_at = datetime.now(UTC)
        await session.commit()
        await session.refresh(existing)
        logger.info(
            "Updated override for %s from %s to %s (capacity=%s)",
            day,
            previous.value,
            reason.value,
            existing.capacity,
        )
        return existing


async def delete_blocked_date(session: AsyncSession, *, day: date) -> bool:
    """Remove the override for ``day``; returns False when none existed."""
    async with storage_guard(session, "delete_blocked_date"):
        result = await session.execute(
            delete(BlockedDate).where(BlockedDate.date == day)
        )
        await session.commit()
    removed = bool(result.rowcount)
    if removed:
        logger.info("Cleared override for %s", day)
    else:
        logger.debug("No override to clear for %s", day)
    return removed


__all__ = [
    "delete_blocked_date",
    "get_blocked_date",
    "list_blocked_dates",
    "upsert_blocked_date",
]
