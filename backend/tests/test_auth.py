"""Authentication and admin access tests."""
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


async def test_login_issues_token(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    token = await _authenticate(
        client, str(app_context["admin_email"]).upper(), str(app_context["admin_password"])
    )
    assert token


async def test_wrong_password_rejected(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.post(
        "/api/v1/auth/token",
        data={"username": app_context["admin_email"], "password": "nope"},
    )
    assert response.status_code == 401


async def test_admin_routes_require_token(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    response = await client.get("/api/v1/admin/blocked-dates")
    assert response.status_code == 401

    response = await client.get(
        "/api/v1/admin/blocked-dates", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401


async def test_staff_cannot_manage_schedule(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    token = await _authenticate(
        client, str(app_context["staff_email"]), str(app_context["staff_password"])
    )
    response = await client.post(
        "/api/v1/admin/blocked-dates",
        json={"date": "2025-07-04", "reason": "Closed"},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 403


async def test_me_returns_current_user(app_context: dict[str, object]) -> None:
    client: AsyncClient = app_context["client"]  # type: ignore[assignment]
    token = await _authenticate(
        client, str(app_context["admin_email"]), str(app_context["admin_password"])
    )
    response = await client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == app_context["admin_email"]
    assert body["role"] == "admin"
