"""Schemas for schedule overrides."""

from __future__ import annotations

import datetime as dt
import uuid

from pydantic import Field, field_validator

from bakery.models.blocked_date import DateOverrideReason
from bakery.schemas.common import CamelModel
from bakery.services.date_utils import parse_override_date


class BlockedDateUpsert(CamelModel):
    """Payload to create or replace the override for one date."""

    date: dt.date
    reason: DateOverrideReason = DateOverrideReason.CLOSED
    capacity: int | None = Field(default=None, ge=0)

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, value: object) -> dt.date:
        return parse_override_date(value)


class BlockedDateRead(CamelModel):
    """Serialized override."""

    id: uuid.UUID
    date: dt.date
    reason: DateOverrideReason
    capacity: int | None = None
    created_at: dt.datetime


class BlockedDateList(CamelModel):
    blocked_dates: list[BlockedDateRead]
