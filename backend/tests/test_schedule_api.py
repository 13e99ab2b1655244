"""Admin schedule API tests."""
from __future__ import annotations

from datetime import date

import pytest
from httpx import AsyncClient

from bakery.db.session import get_sessionmaker
from bakery.models import BookingStatus, FulfillmentType

pytestmark = pytest.mark.asyncio


async def _authenticate(client: AsyncClient, email: str, password: str) -> str:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200
    return response.json()["access_token"]


async def _admin(app_context: dict[str, object]) -> tuple[AsyncClient, dict[str, str]]:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    token = await _authenticate(
        client, str(app_context["admin_email"]), str(app_context["admin_password"])
    )
    return client, {"Authorization": f"Bearer {token}"}


async def test_month_calendar(app_context: dict[str, object], db_url: str, make_booking) -> None:
    client, headers = await _admin(app_context)
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        session.add(make_booking(date(2025, 7, 2), customer="Morgan"))
        await session.commit()

    response = await client.get("/api/v1/admin/schedule/2025/7", headers=headers)
    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store"
    body = response.json()
    assert body["leadingBlanks"] == 2
    assert len(body["days"]) == 31

    wednesday = body["days"][1]
    assert wednesday["date"] == "2025-07-02"
    assert wednesday["status"] == "available"
    assert wednesday["bookingCount"] == 1
    assert wednesday["remainingSlots"] == 1
    assert wednesday["bookings"][0]["customerName"] == "Morgan"
    assert body["days"][0]["status"] == "closed"


async def test_invalid_month_is_bad_request(app_context: dict[str, object]) -> None:
    client, headers = await _admin(app_context)
    response = await client.get("/api/v1/admin/schedule/2025/13", headers=headers)
    assert response.status_code == 400


async def test_day_detail_and_capacity_adjust(app_context: dict[str, object]) -> None:
    client, headers = await _admin(app_context)

    up = await client.post(
        "/api/v1/admin/schedule/days/2025-07-03/capacity",
        json={"delta": 1},
        headers=headers,
    )
    assert up.status_code == 200
    assert up.json()["capacity"] == 3
    assert up.json()["reason"] == "Open"

    detail = await client.get("/api/v1/admin/schedule/days/2025-07-03", headers=headers)
    assert detail.status_code == 200
    assert detail.json()["capacity"] == 3
    assert detail.json()["remainingSlots"] == 3

    down = await client.post(
        "/api/v1/admin/schedule/days/2025-07-03/capacity",
        json={"delta": -10},
        headers=headers,
    )
    assert down.json()["capacity"] == 0

    past = await client.post(
        "/api/v1/admin/schedule/days/2025-05-03/capacity",
        json={"delta": 1},
        headers=headers,
    )
    assert past.status_code == 400


async def test_bulk_actions(app_context: dict[str, object]) -> None:
    client, headers = await _admin(app_context)

    status_resp = await client.post(
        "/api/v1/admin/schedule/bulk/status",
        json={"dates": ["2025-07-03", "2025-07-04", "2025-05-01"], "reason": "Away"},
        headers=headers,
    )
    assert status_resp.status_code == 200
    body = status_resp.json()
    assert body["succeeded"] == ["2025-07-03", "2025-07-04"]
    assert body["skipped"] == ["2025-05-01"]
    assert body["failed"] == []
    assert body["message"] == "Marked 2 date(s) as Away."

    capacity_resp = await client.post(
        "/api/v1/admin/schedule/bulk/capacity",
        json={"dates": ["2025-07-03"], "capacity": 5},
        headers=headers,
    )
    assert capacity_resp.status_code == 200
    assert capacity_resp.json()["message"] == "Set capacity to 5 for 1 date(s)."

    blocked = await client.get("/api/v1/admin/blocked-dates", headers=headers)
    records = {item["date"]: item for item in blocked.json()["blockedDates"]}
    assert records["2025-07-03"]["reason"] == "Away"
    assert records["2025-07-03"]["capacity"] == 5

    too_many = await client.post(
        "/api/v1/admin/schedule/bulk/capacity",
        json={"dates": ["2025-07-03"], "capacity": 6},
        headers=headers,
    )
    assert too_many.status_code == 400

    clear_resp = await client.post(
        "/api/v1/admin/schedule/bulk/clear",
        json={"dates": ["2025-07-03", "2025-07-04"]},
        headers=headers,
    )
    assert clear_resp.json()["message"] == "Cleared 2 date(s)."
    blocked = await client.get("/api/v1/admin/blocked-dates", headers=headers)
    assert blocked.json()["blockedDates"] == []


async def test_bulk_rejects_empty_or_invalid_dates(app_context: dict[str, object]) -> None:
    client, headers = await _admin(app_context)
    empty = await client.post(
        "/api/v1/admin/schedule/bulk/clear", json={"dates": []}, headers=headers
    )
    assert empty.status_code == 422
    invalid = await client.post(
        "/api/v1/admin/schedule/bulk/clear", json={"dates": ["2025-07-99"]}, headers=headers
    )
    assert invalid.status_code == 400


async def test_check_date_capacity(app_context: dict[str, object], db_url: str, make_booking) -> None:
    client, headers = await _admin(app_context)
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        session.add(make_booking(date(2025, 7, 2), status=BookingStatus.PENDING))
        await session.commit()

    response = await client.get(
        "/api/v1/admin/check-date-capacity", params={"date": "2025-07-02"}, headers=headers
    )
    assert response.status_code == 200
    body = response.json()
    assert body["activeBookings"] == 1
    assert body["pendingBookings"] == 1
    assert body["totalPotential"] == 2
    assert body["maxPerDay"] == 2
    assert body["slotsLeft"] == 1
    assert body["wouldExceedLimit"] is False
    assert body["message"] is None


async def test_reschedule(app_context: dict[str, object], db_url: str, make_booking) -> None:
    client, headers = await _admin(app_context)
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        booking = make_booking(date(2025, 7, 2), fulfillment=FulfillmentType.DELIVERY)
        session.add(booking)
        await session.commit()
        booking_id = str(booking.id)

    # Admin moves are not limited by closed weekdays.
    response = await client.post(
        "/api/v1/admin/reschedule",
        json={"bookingId": booking_id, "newDate": "2025-07-06", "newTime": "11:00 AM"},
        headers=headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["newDate"].startswith("2025-07-06T17:00:00")

    listing = await client.get(
        "/api/v1/bookings",
        params={"startDate": "2025-07-06", "endDate": "2025-07-06"},
        headers=headers,
    )
    moved = listing.json()["bookings"][0]
    assert moved["cakeDetails"]["deliveryTime"] == "11:00 AM"

    missing = await client.post(
        "/api/v1/admin/reschedule",
        json={
            "bookingId": "00000000-0000-0000-0000-000000000000",
            "newDate": "2025-07-06",
        },
        headers=headers,
    )
    assert missing.status_code == 404

    bad_date = await client.post(
        "/api/v1/admin/reschedule",
        json={"bookingId": booking_id, "newDate": "2025-07-6x"},
        headers=headers,
    )
    assert bad_date.status_code == 400
