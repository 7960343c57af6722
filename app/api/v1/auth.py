"""
Authentication API endpoints
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, status, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import (
    create_access_token, create_refresh_token, verify_token,
    user_id_from_payload, get_current_user
)
from app.core.config import settings
from app.db.session import get_db
from app.models.user import User
from app.repos.user_repo import get_user_by_id
from app.services.accounts import authenticate, signup

router = APIRouter()


class UserSignup(BaseModel):
    """User signup request model"""
    email: str = Field(..., max_length=255)
    password: str
    username: Optional[str] = Field(None, max_length=64)


class UserLogin(BaseModel):
    """User login request model"""
    email: str
    password: str


class TokenResponse(BaseModel):
    """Token response model"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class RefreshTokenRequest(BaseModel):
    """Refresh token request model"""
    refresh_token: str


def issue_tokens(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(data={"sub": str(user.id)}),
        refresh_token=create_refresh_token(data={"sub": str(user.id)}),
        expires_in=settings.jwt_access_token_expire_minutes * 60
    )


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup_user(
    user_data: UserSignup,
    session: AsyncSession = Depends(get_db)
):
    """
    Create an account, its profile and a wallet funded with the signup bonus.
    """
    user = await signup(session, user_data.email, user_data.password, user_data.username)
    return issue_tokens(user)


@router.post("/login", response_model=TokenResponse)
async def login_user(
    login_data: UserLogin,
    session: AsyncSession = Depends(get_db)
):
    """
    Login user with email/password.
    """
    user = await authenticate(session, login_data.email, login_data.password)
    return issue_tokens(user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    token_data: RefreshTokenRequest,
    session: AsyncSession = Depends(get_db)
):
    """
    Refresh access token using refresh token.
    """
    payload = verify_token(token_data.refresh_token, "refresh")
    user = await get_user_by_id(session, user_id_from_payload(payload))
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive"
        )
    return issue_tokens(user)


@router.get("/me")
async def get_current_user_info(
    current_user: User = Depends(get_current_user)
):
    """
    Get current user information (session restore).
    """
    return {
        "id": str(current_user.id),
        "email": current_user.email,
        "is_active": current_user.is_active,
        "created_at": current_user.created_at.isoformat() if current_user.created_at else None
    }
