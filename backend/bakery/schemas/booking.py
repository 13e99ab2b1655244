"""Booking schemas."""

from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from pydantic import EmailStr, Field, field_validator

from bakery.core.config import get_settings
from bakery.models.booking import Booking, BookingStatus, FulfillmentType
from bakery.schemas.common import CamelModel
from bakery.services.date_utils import ensure_utc, normalize_timestamp


class CustomerInfo(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=32)


class CakeDetails(CamelModel):
    """Snapshot of the ordered cake; not a live product reference."""

    product_name: str = Field(min_length=1, max_length=200)
    size: str = Field(min_length=1, max_length=80)
    flavor: str = Field(min_length=1, max_length=120)
    shape: str | None = None
    filling: str | None = None
    design_notes: str | None = None
    price: Decimal | None = Field(default=None, ge=0)
    fulfillment_type: FulfillmentType = FulfillmentType.PICKUP
    pickup_time: str | None = None
    delivery_time: str | None = None


class BookingCreate(CamelModel):
    """Checkout payload for a new booking."""

    order_date: dt.datetime
    status: BookingStatus = BookingStatus.PENDING
    customer_info: CustomerInfo
    cake_details: CakeDetails

    @field_validator("order_date", mode="before")
    @classmethod
    def _normalize_order_date(cls, value: object) -> dt.datetime:
        return normalize_timestamp(value, get_settings().tz)

    @field_validator("status")
    @classmethod
    def _reject_cancelled(cls, value: BookingStatus) -> BookingStatus:
        if value == BookingStatus.CANCELLED:
            raise ValueError("New bookings cannot start cancelled")
        return value


class BookingStatusUpdate(CamelModel):
    status: BookingStatus


class BookingReschedule(CamelModel):
    """Admin move of a booking to another date, without date restrictions."""

    booking_id: uuid.UUID
    new_date: str = Field(min_length=10)
    new_time: str | None = None


class BookingRead(CamelModel):
    """Serialized booking with nested customer and cake snapshots."""

    id: uuid.UUID
    order_number: str
    order_date: dt.datetime
    status: BookingStatus
    customer_info: CustomerInfo
    cake_details: CakeDetails
    created_at: dt.datetime

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingRead":
        return cls(
            id=booking.id,
            order_number=booking.order_number,
            order_date=ensure_utc(booking.order_date),
            status=booking.status,
            customer_info=CustomerInfo(
                name=booking.customer_name,
                email=booking.customer_email,
                phone=booking.customer_phone,
            ),
            cake_details=CakeDetails(
                product_name=booking.product_name,
                size=booking.size,
                flavor=booking.flavor,
                shape=booking.shape,
                filling=booking.filling,
                design_notes=booking.design_notes,
                price=booking.price,
                fulfillment_type=booking.fulfillment_type,
                pickup_time=booking.pickup_time,
                delivery_time=booking.delivery_time,
            ),
            created_at=ensure_utc(booking.created_at),
        )


class BookingList(CamelModel):
    bookings: list[BookingRead]


class BookingCreated(CamelModel):
    success: bool = True
    booking_id: uuid.UUID
    order_number: str


class RescheduleResult(CamelModel):
    success: bool = True
    message: str
    new_date: dt.datetime
