"""Schemas for customer-facing availability queries."""

from __future__ import annotations

from bakery.schemas.common import CamelModel


class UnavailableDatesResponse(CamelModel):
    """Dates the booking calendar must disable."""

    unavailable_dates: list[str]


class AvailabilityCheckRead(CamelModel):
    available: bool
    reason: str | None = None
    message: str | None = None
    slots_left: int | None = None
