"""Test fixtures for the bakery schedule backend."""
from __future__ import annotations

import os
import uuid
from collections.abc import AsyncIterator, Callable
from datetime import UTC, date, datetime, time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from bakery.api.deps import get_business_today
from bakery.core.config import get_settings
from bakery.core.security import hash_password
from bakery.db.base import Base
from bakery.db.session import dispose_engine, get_sessionmaker
from bakery.main import app
from bakery.models import (
    Booking,
    BookingStatus,
    FulfillmentType,
    User,
    UserRole,
    UserStatus,
)

# A Sunday; the buffer window then runs through 2025-06-10.
TODAY = date(2025, 6, 1)


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def app_context(
    reset_database: AsyncIterator[None], db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client, seeded users and a fixed business date."""
    sessionmaker = get_sessionmaker(db_url)
    admin_password = "Passw0rd!"
    staff_password = "Staff123!"

    async with sessionmaker() as session:
        admin = User(
            email="kassy@example.com",
            hashed_password=hash_password(admin_password),
            name="Kassy",
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
        )
        staff = User(
            email="helper@example.com",
            hashed_password=hash_password(staff_password),
            name="Helper",
            role=UserRole.STAFF,
            status=UserStatus.ACTIVE,
        )
        session.add_all([admin, staff])
        await session.commit()

        context: dict[str, object] = {
            "admin_email": admin.email,
            "admin_password": admin_password,
            "staff_email": staff.email,
            "staff_password": staff_password,
            "today": TODAY,
        }

    app.dependency_overrides[get_business_today] = lambda: TODAY
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            context["client"] = client
            yield context
    finally:
        app.dependency_overrides.pop(get_business_today, None)


@pytest_asyncio.fixture()
async def session(reset_database: AsyncIterator[None], db_url: str):
    """A database session on a freshly created schema."""
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as db_session:
        yield db_session


def _make_booking(
    day: date,
    *,
    status: BookingStatus = BookingStatus.CONFIRMED,
    at: time = time(17, 0),
    fulfillment: FulfillmentType = FulfillmentType.PICKUP,
    customer: str = "Jamie Rivera",
) -> Booking:
    """Booking on ``day``; the default 17:00 UTC is midday in Chicago."""
    return Booking(
        order_number=uuid.uuid4().hex[:14],
        order_date=datetime.combine(day, at, tzinfo=UTC),
        status=status,
        customer_name=customer,
        customer_email="jamie@example.com",
        product_name="Celebration Cake",
        size='8"',
        flavor="Vanilla",
        fulfillment_type=fulfillment,
    )


@pytest.fixture()
def make_booking() -> Callable[..., Booking]:
    return _make_booking
