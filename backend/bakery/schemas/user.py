"""User-related schemas."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from bakery.models.user import UserRole, UserStatus


class UserCreate(BaseModel):
    """Payload for creating a dashboard user."""

    email: EmailStr
    password: str = Field(min_length=8)
    name: str = Field(min_length=1, max_length=120)
    role: UserRole = UserRole.ADMIN
    status: UserStatus = UserStatus.ACTIVE


class UserRead(BaseModel):
    id: uuid.UUID
    email: str
    name: str
    role: UserRole
    status: UserStatus

    model_config = ConfigDict(from_attributes=True)
