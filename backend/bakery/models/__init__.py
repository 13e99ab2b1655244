"""ORM models package export."""

from bakery.models.blocked_date import BlockedDate, DateOverrideReason
from bakery.models.booking import (
    ACTIVE_BOOKING_STATUSES,
    Booking,
    BookingStatus,
    FulfillmentType,
)
from bakery.models.user import User, UserRole, UserStatus

__all__ = [
    "ACTIVE_BOOKING_STATUSES",
    "BlockedDate",
    "Booking",
    "BookingStatus",
    "DateOverrideReason",
    "FulfillmentType",
    "User",
    "UserRole",
    "UserStatus",
]
