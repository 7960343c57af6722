"""
Profile API endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.services.accounts import get_profile, update_profile

router = APIRouter()


class ProfileUpdate(BaseModel):
    username: Optional[str] = Field(None, max_length=64)
    mpesa_phone: Optional[str] = None


@router.get("/")
async def read_profile(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Profile with wallet summary and habit stats.
    """
    profile = await get_profile(session, current_user.id)
    profile["email"] = current_user.email
    return profile


@router.patch("/")
async def patch_profile(
    profile_data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    profile = await update_profile(
        session,
        current_user.id,
        username=profile_data.username,
        mpesa_phone=profile_data.mpesa_phone
    )
    profile["email"] = current_user.email
    return profile
