"""Dev seeding helper - creates a Bid Creator account for local runs."""

import asyncio
import os
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bidplatform.app.db.engine import get_async_engine
from bidplatform.app.db.models import User
from bidplatform.app.security import hash_password

DEV_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
DEV_USER_EMAIL = "dev@example.com"


async def seed_dev_user(password: str | None = None) -> User:
    """Seed the dev Bid Creator account.

    This function is idempotent - safe to run multiple times. The password
    comes from DEV_USER_PASSWORD when not given.
    """
    password = password or os.getenv("DEV_USER_PASSWORD", "dev-password")

    async with AsyncSession(get_async_engine(), expire_on_commit=False) as session:
        result = await session.execute(select(User).where(User.user_id == DEV_USER_ID))
        user = result.scalar_one_or_none()

        if user is None:
            print(f"Creating dev user with id {DEV_USER_ID}...")
            user = User(
                user_id=DEV_USER_ID,
                name="Dev Creator",
                email=DEV_USER_EMAIL,
                password_hash=hash_password(password),
                role="Bid Creator",
            )
            session.add(user)
            await session.commit()
        else:
            print(f"Dev user already exists: {user.email}")

        print("Dev seeding complete")
        return user


if __name__ == "__main__":
    asyncio.run(seed_dev_user())
