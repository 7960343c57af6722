"""
Profile repository
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.profile import Profile


async def create_profile(
    session: AsyncSession,
    user_id: UUID,
    username: Optional[str] = None
) -> Profile:
    """Create the profile row for a new user. Flushed, not committed."""
    profile = Profile(user_id=user_id, username=username)
    session.add(profile)
    await session.flush()
    return profile


async def get_profile_for_user(session: AsyncSession, user_id: UUID) -> Optional[Profile]:
    result = await session.execute(
        select(Profile).where(Profile.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def update_profile_fields(session: AsyncSession, profile: Profile, **fields) -> Profile:
    """
    Set the given profile attributes and flush.

    Only keys that exist on the model are applied; the caller commits.
    """
    for key, value in fields.items():
        if hasattr(Profile, key):
            setattr(profile, key, value)
    await session.flush()
    return profile
