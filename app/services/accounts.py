"""
Account service: signup, sign-in and profile management
"""

import logging
import re
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_password_hash, verify_password
from app.core.config import settings
from app.core.exceptions import AuthenticationFailed, NotFound, ValidationError
from app.db.session import atomic
from app.models.habit import Habit
from app.models.user import User
from app.repos.profile_repo import create_profile, get_profile_for_user, update_profile_fields
from app.repos.user_repo import create_user, get_user_by_email
from app.repos.wallet_repo import create_wallet_for_user, get_wallet_for_user
from app.services.phone import format_kenyan_mobile, is_valid_kenyan_mobile

# Configure logging
logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


async def signup(
    session: AsyncSession,
    email: str,
    password: str,
    username: Optional[str] = None
) -> User:
    """
    Register a user together with their profile and funded wallet.

    Raises:
        ValidationError: invalid email, short password or email taken
    """
    email = (email or "").strip().lower()
    if not EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if await get_user_by_email(session, email):
        raise ValidationError("An account with this email already exists")

    async with atomic(session, "signup"):
        try:
            user = await create_user(session, email=email, password_hash=get_password_hash(password))
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            raise ValidationError("An account with this email already exists")
        await create_profile(session, user.id, username=(username or "").strip() or email.split("@")[0])
        await create_wallet_for_user(session, user.id, starting_balance=settings.starting_balance)

    logger.info(f"New user {user.id} signed up with starting balance {settings.starting_balance}")
    return user


async def authenticate(session: AsyncSession, email: str, password: str) -> User:
    """Return the active user for these credentials or raise AuthenticationFailed."""
    user = await get_user_by_email(session, (email or "").strip())
    if not user or not verify_password(password or "", user.password_hash):
        logger.warning(f"Failed sign-in for {email}")
        raise AuthenticationFailed("Invalid email or password")
    if not user.is_active:
        raise AuthenticationFailed("User account is not active")
    return user


async def get_profile(session: AsyncSession, user_id: UUID) -> Dict[str, Any]:
    profile = await get_profile_for_user(session, user_id)
    if not profile:
        raise NotFound("Profile not found")
    wallet = await get_wallet_for_user(session, user_id)

    result = await session.execute(
        select(
            func.coalesce(func.max(Habit.best_streak), 0),
            func.count(Habit.id).filter(Habit.is_completed.is_(True))
        ).where(Habit.user_id == user_id)
    )
    best_streak, habits_completed = result.one()

    data = profile.to_dict()
    data["wallet"] = wallet.to_dict() if wallet else None
    data["stats"] = {
        "best_streak": int(best_streak or 0),
        "habits_completed": int(habits_completed or 0),
    }
    return data


async def update_profile(
    session: AsyncSession,
    user_id: UUID,
    username: Optional[str] = None,
    mpesa_phone: Optional[str] = None
) -> Dict[str, Any]:
    """
    Update the editable profile fields. Only the fields given are changed.

    Raises:
        ValidationError: invalid phone or blank username
    """
    fields = {}
    if username is not None:
        username = username.strip()
        if not username:
            raise ValidationError("Username cannot be empty")
        fields["username"] = username
    if mpesa_phone is not None:
        if not is_valid_kenyan_mobile(mpesa_phone):
            raise ValidationError("Please enter a valid Kenyan phone number")
        fields["mpesa_phone"] = format_kenyan_mobile(mpesa_phone)

    async with atomic(session, "update profile"):
        profile = await get_profile_for_user(session, user_id)
        if not profile:
            raise NotFound("Profile not found")
        await update_profile_fields(session, profile, **fields)

    logger.info(f"User {user_id} updated profile fields: {list(fields)}")
    return await get_profile(session, user_id)
