"""Booking lifecycle: creation, status transitions and rescheduling."""

from __future__ import annotations

import logging
import random
import time as _time
import uuid
from datetime import date, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from bakery.core.config import get_settings
from bakery.db.session import storage_guard
from bakery.models.booking import Booking, BookingStatus, FulfillmentType
from bakery.schemas.booking import BookingCreate
from bakery.security.redact import mask_email
from bakery.services import availability_service
from bakery.services.date_utils import normalize_timestamp, to_business_date

logger = logging.getLogger(__name__)


class BookingRejected(ValueError):
    """The requested date cannot take another booking."""

    def __init__(self, message: str, reason: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason


def generate_order_number() -> str:
    """Return ``<last 10 digits of epoch ms>-<3 random digits>``."""
    millis = str(int(_time.time() * 1000))[-10:]
    return f"{millis}-{random.randint(0, 999):03d}"


async def get_booking(session: AsyncSession, *, booking_id: uuid.UUID) -> Booking | None:
    async with storage_guard(session, "get_booking"):
        return await session.get(Booking, booking_id)


async def create_booking(
    session: AsyncSession,
    payload: BookingCreate,
    *,
    today: date,
    skip_buffer_check: bool = False,
    override_capacity: bool = False,
) -> Booking:
    """Validate the order date and persist a new booking.

    ``skip_buffer_check`` lets a pre-approved quote through the lead-time rule
    only; capacity is still enforced. ``override_capacity`` skips every check.
    """
    settings = get_settings()
    order_day = to_business_date(payload.order_date, settings.tz)
    logger.info(
        "Creating booking for %s on %s (%s)",
        mask_email(str(payload.customer_info.email)),
        order_day,
        payload.cake_details.product_name,
    )

    if override_capacity:
        logger.warning("Availability checks overridden for booking on %s", order_day)
    else:
        result = await availability_service.check_date_availability(
            session, day=order_day, today=today
        )
        if not result.available:
            if skip_buffer_check and result.reason == "too_soon":
                logger.info("Skipping lead-time rule for pre-approved booking on %s", order_day)
            else:
                raise BookingRejected(result.message or "Date not available", result.reason)

    customer = payload.customer_info
    cake = payload.cake_details
    booking = Booking(
        order_number=generate_order_number(),
        order_date=payload.order_date,
        status=payload.status,
        customer_name=customer.name,
        customer_email=str(customer.email),
        customer_phone=customer.phone,
        product_name=cake.product_name,
        size=cake.size,
        flavor=cake.flavor,
        shape=cake.shape,
        filling=cake.filling,
        design_notes=cake.design_notes,
        price=cake.price,
        fulfillment_type=cake.fulfillment_type,
        pickup_time=cake.pickup_time,
        delivery_time=cake.delivery_time,
    )
    async with storage_guard(session, "create_booking"):
        session.add(booking)
        await session.commit()
        await session.refresh(booking)
    logger.info("Booking %s saved as %s", booking.id, booking.order_number)
    return booking


async def update_booking_status(
    session: AsyncSession, *, booking_id: uuid.UUID, status: BookingStatus
) -> Booking:
    booking = await get_booking(session, booking_id=booking_id)
    if booking is None:
        raise ValueError("Booking not found")
    async with storage_guard(session, "update_booking_status"):
        previous = booking.status
        booking.status = status
        await session.commit()
        await session.refresh(booking)
    logger.info("Booking %s moved from %s to %s", booking.id, previous.value, status.value)
    return booking


async def reschedule_booking(
    session: AsyncSession,
    *,
    booking_id: uuid.UUID,
    new_date: str | date | datetime,
    new_time: str | None = None,
) -> Booking:
    """Move a booking to another date with no availability restrictions.

    A bare ``YYYY-MM-DD`` lands at noon business time. ``new_time`` updates
    the delivery or pickup window depending on fulfillment type.
    """
    settings = get_settings()
    order_date = normalize_timestamp(new_date, settings.tz)
    booking = await get_booking(session, booking_id=booking_id)
    if booking is None:
        raise ValueError("Booking not found")
    async with storage_guard(session, "reschedule_booking"):
        booking.order_date = order_date
        if new_time:
            if booking.fulfillment_type == FulfillmentType.DELIVERY:
                booking.delivery_time = new_time
            else:
                booking.pickup_time = new_time
        await session.commit()
        await session.refresh(booking)
    logger.info(
        "Booking %s rescheduled to %s", booking.id, to_business_date(order_date, settings.tz)
    )
    return booking


__all__ = [
    "BookingRejected",
    "create_booking",
    "generate_order_number",
    "get_booking",
    "reschedule_booking",
    "update_booking_status",
]
