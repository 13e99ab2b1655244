"""Cake order bookings scheduled on a calendar date."""
from __future__ import annotations

import enum
import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bakery.db.base import Base
from bakery.models.mixins import TimestampMixin


class BookingStatus(str, enum.Enum):
    """Lifecycle states for bookings."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class FulfillmentType(str, enum.Enum):
    """How the customer receives the cake."""

    PICKUP = "pickup"
    DELIVERY = "delivery"


ACTIVE_BOOKING_STATUSES: frozenset[BookingStatus] = frozenset(
    {BookingStatus.PENDING, BookingStatus.CONFIRMED}
)


class Booking(TimestampMixin, Base):
    """A cake order occupying one capacity slot on its order date.

    Customer and cake fields are a denormalized snapshot taken at checkout.
    """

    __tablename__ = "bookings"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    order_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    order_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), index=True, nullable=False
    )
    status: Mapped[BookingStatus] = mapped_column(
        Enum(BookingStatus), default=BookingStatus.PENDING, nullable=False
    )

    customer_name: Mapped[str] = mapped_column(String(200), nullable=False)
    customer_email: Mapped[str] = mapped_column(String(320), nullable=False)
    customer_phone: Mapped[str | None] = mapped_column(String(32))

    product_name: Mapped[str] = mapped_column(String(200), nullable=False)
    size: Mapped[str] = mapped_column(String(80), nullable=False)
    flavor: Mapped[str] = mapped_column(String(120), nullable=False)
    shape: Mapped[str | None] = mapped_column(String(80))
    filling: Mapped[str | None] = mapped_column(String(120))
    design_notes: Mapped[str | None] = mapped_column(Text())
    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    fulfillment_type: Mapped[FulfillmentType] = mapped_column(
        Enum(FulfillmentType), default=FulfillmentType.PICKUP, nullable=False
    )
    pickup_time: Mapped[str | None] = mapped_column(String(64))
    delivery_time: Mapped[str | None] = mapped_column(String(64))
