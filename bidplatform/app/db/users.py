"""Repository functions for user accounts."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bidplatform.app.db.models import User


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """Look up a user by (normalised) email address."""
    result = await session.execute(select(User).where(User.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    """Look up a user by id."""
    result = await session.execute(select(User).where(User.user_id == user_id))
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    *,
    name: str,
    email: str,
    password_hash: str,
    role: str,
) -> User:
    """Insert a new user and commit.

    Name and email are trimmed; email is lowercased so lookups are
    case-insensitive.
    """
    user = User(
        user_id=uuid.uuid4(),
        name=name.strip(),
        email=email.strip().lower(),
        password_hash=password_hash,
        role=role,
    )
    session.add(user)
    await session.commit()
    return user


async def list_users(session: AsyncSession) -> list[User]:
    """Return every known user."""
    result = await session.execute(select(User).order_by(User.created_at))
    return list(result.scalars().all())
