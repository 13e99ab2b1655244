from __future__ import annotations

import asyncio

from bakery.core.config import get_settings
from bakery.db.session import get_sessionmaker
from bakery.models.user import UserRole, UserStatus
from bakery.schemas.user import UserCreate
from bakery.services import user_service

EMAIL = "admin@example.com"
PASSWORD = "admin1234"


async def main() -> None:
    settings = get_settings()
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        if await user_service.get_user_by_email(session, EMAIL) is not None:
            print(f"User {EMAIL} already exists")
            return
        await user_service.create_user(
            session,
            UserCreate(
                email=EMAIL,
                password=PASSWORD,
                name="Dev Admin",
                role=UserRole.ADMIN,
                status=UserStatus.ACTIVE,
            ),
        )
        print(f"Created admin {EMAIL} / {PASSWORD}")


if __name__ == "__main__":
    asyncio.run(main())
