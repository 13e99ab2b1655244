"""Per-date schedule overrides."""
from __future__ import annotations

import enum
import uuid
import datetime as dt

from sqlalchemy import CheckConstraint, Date, Enum, Integer
from sqlalchemy.orm import Mapped, mapped_column

from bakery.db.base import Base
from bakery.models.mixins import TimestampMixin


class DateOverrideReason(str, enum.Enum):
    """Manual status an admin can pin on a calendar date."""

    OPEN = "Open"
    CLOSED = "Closed"
    AWAY = "Away"


class BlockedDate(TimestampMixin, Base):
    """Override of a single date's default availability and capacity.

    At most one row exists per calendar date; no row means the default rules
    apply.
    """

    __tablename__ = "blocked_dates"
    __table_args__ = (
        CheckConstraint(
            "capacity IS NULL OR capacity >= 0", name="ck_blocked_dates_capacity"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True, default=uuid.uuid4, unique=True
    )
    date: Mapped[dt.date] = mapped_column(Date, unique=True, index=True, nullable=False)
    reason: Mapped[DateOverrideReason] = mapped_column(
        Enum(
            DateOverrideReason,
            name="dateoverridereason",
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=False,
    )
    capacity: Mapped[int | None] = mapped_column(Integer())
