"""Database session, engine helpers and the storage guard."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from bakery.core.config import get_settings
from bakery.core.exceptions import StorageError, StorageTimeoutError

logger = logging.getLogger(__name__)

_engine_cache: dict[str, AsyncEngine] = {}
_sessionmaker_cache: dict[str, async_sessionmaker[AsyncSession]] = {}


def _resolve_database_url(override: str | None = None) -> str:
    settings = get_settings()
    return override or settings.database_url


def get_sessionmaker(
    database_url: str | None = None,
) -> async_sessionmaker[AsyncSession]:
    """Return (and cache) an async sessionmaker for the given database URL."""
    url = _resolve_database_url(database_url)
    sessionmaker = _sessionmaker_cache.get(url)
    if sessionmaker is None:
        engine = create_async_engine(url, echo=False, future=True)
        sessionmaker = async_sessionmaker(
            engine, expire_on_commit=False, class_=AsyncSession
        )
        _engine_cache[url] = engine
        _sessionmaker_cache[url] = sessionmaker
    return sessionmaker


async def get_session() -> AsyncIterator[AsyncSession]:
    """Yield an async database session using the configured engine."""
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        yield session


async def dispose_engine(database_url: str | None = None) -> None:
    """Dispose the cached engine/sessionmaker for the given database URL."""
    url = _resolve_database_url(database_url)
    engine = _engine_cache.pop(url, None)
    if engine is not None:
        await engine.dispose()
    _sessionmaker_cache.pop(url, None)


@asynccontextmanager
async def storage_guard(
    session: AsyncSession, operation: str
) -> AsyncIterator[AsyncSession]:
    """Bound a unit of database work by the storage timeout.

    SQLAlchemy errors are rolled back and re-raised as ``StorageError``; an
    expired deadline raises ``StorageTimeoutError``.
    """

    timeout = get_settings().storage_timeout_seconds
    try:
        async with asyncio.timeout(timeout):
            yield session
    except TimeoutError as exc:
        await _safe_rollback(session)
        logger.warning("Storage operation %s timed out after %ss", operation, timeout)
        raise StorageTimeoutError(f"{operation} timed out") from exc
    except SQLAlchemyError as exc:
        await _safe_rollback(session)
        logger.exception("Storage operation %s failed", operation)
        raise StorageError(f"{operation} failed") from exc


async def _safe_rollback(session: AsyncSession) -> None:
    try:
        await session.rollback()
    except SQLAlchemyError:
        logger.exception("Rollback failed")
