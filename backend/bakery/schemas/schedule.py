"""Schemas for the admin schedule calendar and bulk editing."""

from __future__ import annotations

import datetime as dt
import uuid

from pydantic import Field, field_validator

from bakery.models.blocked_date import DateOverrideReason
from bakery.models.booking import BookingStatus
from bakery.schemas.common import CamelModel
from bakery.services.availability_rules import DateStatus
from bakery.services.date_utils import parse_override_date


def _parse_dates(values: object) -> object:
    if not isinstance(values, list):
        return values
    return [parse_override_date(value) for value in values]


class BookingSummary(CamelModel):
    """Entry shown inside a calendar cell; links to the order detail view."""

    id: uuid.UUID
    order_number: str
    customer_name: str
    product_name: str
    status: BookingStatus


class DayCellRead(CamelModel):
    date: dt.date
    day: int
    status: DateStatus
    reason: DateOverrideReason | None = None
    capacity: int
    booking_count: int
    remaining_slots: int
    is_today: bool
    selectable: bool
    bookings: list[BookingSummary] = Field(default_factory=list)


class MonthCalendarRead(CamelModel):
    year: int
    month: int
    today: dt.date
    leading_blanks: int
    days: list[DayCellRead]


class CapacityAdjust(CamelModel):
    delta: int = Field(ge=-100, le=100)


class BulkDates(CamelModel):
    dates: list[dt.date] = Field(min_length=1)

    @field_validator("dates", mode="before")
    @classmethod
    def _parse(cls, value: object) -> object:
        return _parse_dates(value)


class BulkStatusRequest(BulkDates):
    reason: DateOverrideReason


class BulkCapacityRequest(BulkDates):
    capacity: int = Field(ge=0)


class BulkFailure(CamelModel):
    date: dt.date
    error: str


class BulkActionRead(CamelModel):
    action: str
    succeeded: list[dt.date]
    failed: list[BulkFailure]
    skipped: list[dt.date]
    message: str


class DateCapacityRead(CamelModel):
    """Admin capacity check before sending a quote or adding an order."""

    date: dt.date
    active_bookings: int
    pending_bookings: int
    total_potential: int
    max_per_day: int
    slots_left: int
    would_exceed_limit: bool
    message: str | None = None
