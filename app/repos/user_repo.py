"""
User repository with async CRUD operations
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.user import User


async def create_user(
    session: AsyncSession,
    email: str,
    password_hash: str,
    is_active: bool = True
) -> User:
    """
    Create a new user. Flushed, not committed.

    Args:
        session: Database session
        email: Login email (must be unique)
        password_hash: Hashed password
        is_active: Whether the account may sign in

    Returns:
        Created User instance
    """
    user = User(
        email=email.lower(),
        password_hash=password_hash,
        is_active=is_active
    )
    session.add(user)
    await session.flush()
    return user


async def get_user_by_id(session: AsyncSession, user_id: UUID) -> Optional[User]:
    """
    Get user by ID.

    Args:
        session: Database session
        user_id: User UUID

    Returns:
        User instance or None if not found
    """
    result = await session.execute(
        select(User).where(User.id == user_id)
    )
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    """
    Get user by email (case-insensitive).

    Args:
        session: Database session
        email: Login email

    Returns:
        User instance or None if not found
    """
    result = await session.execute(
        select(User).where(User.email == email.lower())
    )
    return result.scalar_one_or_none()
