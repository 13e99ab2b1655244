"""Schedule override API tests."""
from __future__ import annotations

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _authenticate(client: AsyncClient, email: str, password: str) -> str:
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": email, "password": password},
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )
    assert response.status_code == 200
    return response.json()["access_token"]


async def _admin_headers(app_context: dict[str, object]) -> dict[str, str]:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    token = await _authenticate(
        client, str(app_context["admin_email"]), str(app_context["admin_password"])
    )
    return {"Authorization": f"Bearer {token}"}


async def test_blocked_date_lifecycle(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = await _admin_headers(app_context)

    create_resp = await client.post(
        "/api/v1/admin/blocked-dates",
        json={"date": "2025-07-04", "reason": "Closed", "capacity": 1},
        headers=headers,
    )
    assert create_resp.status_code == 200
    created = create_resp.json()
    assert created["date"] == "2025-07-04"
    assert created["reason"] == "Closed"
    assert created["capacity"] == 1
    assert "createdAt" in created

    # Omitting capacity keeps the stored value.
    update_resp = await client.post(
        "/api/v1/admin/blocked-dates",
        json={"date": "2025-07-04", "reason": "Open"},
        headers=headers,
    )
    assert update_resp.status_code == 200
    assert update_resp.json()["id"] == created["id"]
    assert update_resp.json()["capacity"] == 1

    list_resp = await client.get("/api/v1/admin/blocked-dates", headers=headers)
    assert list_resp.status_code == 200
    assert list_resp.headers["cache-control"] == "no-store"
    blocked = list_resp.json()["blockedDates"]
    assert [(item["date"], item["reason"]) for item in blocked] == [("2025-07-04", "Open")]

    delete_resp = await client.delete(
        "/api/v1/admin/blocked-dates", params={"date": "2025-07-04"}, headers=headers
    )
    assert delete_resp.status_code == 204

    again = await client.delete(
        "/api/v1/admin/blocked-dates", params={"date": "2025-07-04"}, headers=headers
    )
    assert again.status_code == 204

    final = await client.get("/api/v1/admin/blocked-dates", headers=headers)
    assert final.json() == {"blockedDates": []}


async def test_override_changes_public_availability(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = await _admin_headers(app_context)
    params = {"startDate": "2025-06-05", "endDate": "2025-06-05"}

    before = await client.get("/api/v1/available-dates", params=params)
    assert before.json()["unavailableDates"] == ["2025-06-05"]

    await client.post(
        "/api/v1/admin/blocked-dates",
        json={"date": "2025-06-05", "reason": "Open"},
        headers=headers,
    )
    after = await client.get("/api/v1/available-dates", params=params)
    assert after.json()["unavailableDates"] == []


@pytest.mark.parametrize(
    "body",
    [
        {"date": "07/04/2025", "reason": "Closed"},
        {"date": "2025-02-30", "reason": "Closed"},
    ],
)
async def test_invalid_dates_are_bad_requests(app_context: dict[str, object], body: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = await _admin_headers(app_context)
    response = await client.post("/api/v1/admin/blocked-dates", json=body, headers=headers)
    assert response.status_code == 400


async def test_negative_capacity_rejected(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = await _admin_headers(app_context)
    response = await client.post(
        "/api/v1/admin/blocked-dates",
        json={"date": "2025-07-04", "reason": "Closed", "capacity": -1},
        headers=headers,
    )
    assert response.status_code == 422


async def test_delete_requires_valid_date(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = await _admin_headers(app_context)
    response = await client.delete(
        "/api/v1/admin/blocked-dates", params={"date": "tomorrow"}, headers=headers
    )
    assert response.status_code == 400


async def test_utc_midnight_timestamp_keeps_its_date(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    headers = await _admin_headers(app_context)

    response = await client.post(
        "/api/v1/admin/blocked-dates",
        json={"date": "2025-07-02T00:00:00.000Z", "reason": "Closed"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["date"] == "2025-07-02"

    bulk = await client.post(
        "/api/v1/admin/schedule/bulk/status",
        json={"dates": ["2025-07-03T00:00:00.000Z"], "reason": "Away"},
        headers=headers,
    )
    assert bulk.status_code == 200
    assert bulk.json()["succeeded"] == ["2025-07-03"]

    delete_resp = await client.delete(
        "/api/v1/admin/blocked-dates",
        params={"date": "2025-07-02T00:00:00.000Z"},
        headers=headers,
    )
    assert delete_resp.status_code == 204
    remaining = (await client.get("/api/v1/admin/blocked-dates", headers=headers)).json()
    assert [item["date"] for item in remaining["blockedDates"]] == ["2025-07-03"]
