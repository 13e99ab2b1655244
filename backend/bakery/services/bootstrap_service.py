"""Bootstrap helpers for default data."""

from __future__ import annotations

import logging

from bakery.core.config import get_settings
from bakery.db.session import get_sessionmaker
from bakery.models import UserRole, UserStatus
from bakery.schemas.user import UserCreate
from bakery.security.redact import mask_email
from bakery.services.user_service import create_user, get_user_by_email

logger = logging.getLogger(__name__)


async def ensure_default_admin() -> None:
    """Create the configured admin user if one does not yet exist.

    Nothing happens unless both ``ADMIN_EMAIL`` and ``ADMIN_PASSWORD`` are set.
    """

    settings = get_settings()
    if not settings.admin_email or not settings.admin_password:
        logger.debug("No bootstrap admin configured")
        return
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        if await get_user_by_email(session, settings.admin_email) is not None:
            return
        payload = UserCreate(
            email=settings.admin_email,
            password=settings.admin_password,
            name=settings.admin_name,
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
        )
        await create_user(session, payload)
        logger.info("Created bootstrap admin %s", mask_email(settings.admin_email))
