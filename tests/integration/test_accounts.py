"""
Integration tests for signup, sign-in and profiles
"""

import pytest
from datetime import date
from decimal import Decimal

from app.core.exceptions import AuthenticationFailed, ValidationError
from app.repos.profile_repo import get_profile_for_user
from app.repos.wallet_repo import get_wallet_for_user
from app.services import habits as habit_service
from app.services import accounts
from app.services.accounts import authenticate, get_profile, signup, update_profile


@pytest.mark.integration
@pytest.mark.asyncio
async def test_signup_creates_profile_and_funded_wallet(async_session):
    user = await signup(async_session, "  Kamau@Example.com ", "secret123")

    assert user.email == "kamau@example.com"
    assert user.password_hash != "secret123"
    wallet = await get_wallet_for_user(async_session, user.id)
    assert wallet.balance == Decimal("10000")
    assert wallet.total_earned == Decimal("0")
    profile = await get_profile_for_user(async_session, user.id)
    assert profile.username == "kamau"


@pytest.mark.integration
@pytest.mark.asyncio
@pytest.mark.parametrize("email,password", [
    ("not-an-email", "secret123"),
    ("short@example.com", "12345"),
])
async def test_signup_validation(async_session, email, password):
    with pytest.raises(ValidationError):
        await signup(async_session, email, password)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_signup_duplicate_email(async_session, test_user):
    with pytest.raises(ValidationError):
        await signup(async_session, "WANJIKU@example.com", "another1")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_concurrent_duplicate_signup_is_a_validation_error(async_session, test_user, monkeypatch):
    user_id = test_user.id

    async def no_existing_user(session, email):
        return None

    # Both signups pass the lookup; the unique index decides
    monkeypatch.setattr(accounts, "get_user_by_email", no_existing_user)

    with pytest.raises(ValidationError) as exc_info:
        await signup(async_session, "wanjiku@example.com", "another1")

    assert exc_info.value.message == "An account with this email already exists"
    assert await get_profile_for_user(async_session, user_id) is not None


@pytest.mark.integration
@pytest.mark.asyncio
async def test_authenticate(async_session, test_user):
    user = await authenticate(async_session, "wanjiku@example.com", "secret123")
    assert user.id == test_user.id

    with pytest.raises(AuthenticationFailed):
        await authenticate(async_session, "wanjiku@example.com", "wrong-password")
    with pytest.raises(AuthenticationFailed):
        await authenticate(async_session, "nobody@example.com", "secret123")


@pytest.mark.integration
@pytest.mark.asyncio
async def test_profile_includes_wallet_and_stats(async_session, test_user):
    user_id = test_user.id
    day = date(2026, 10, 1)
    habit = await habit_service.create_habit(async_session, user_id, "Stretch", Decimal("100"), 1, today=day)
    await habit_service.complete_habit(async_session, user_id, habit.id, today=day)

    profile = await get_profile(async_session, user_id)

    assert profile["username"] == "wanjiku"
    assert Decimal(profile["wallet"]["balance"]) == Decimal("10020")
    assert Decimal(profile["wallet"]["total_earned"]) == Decimal("120")
    assert Decimal(profile["wallet"]["total_staked"]) == Decimal("100")
    assert profile["stats"] == {"best_streak": 1, "habits_completed": 1}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_update_profile_normalizes_phone(async_session, test_user):
    user_id = test_user.id
    profile = await update_profile(async_session, user_id, username="Wanjiku M", mpesa_phone="0712345678")
    assert profile["username"] == "Wanjiku M"
    assert profile["mpesa_phone"] == "254712345678"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_update_profile_rejects_bad_phone(async_session, test_user):
    user_id = test_user.id
    with pytest.raises(ValidationError):
        await update_profile(async_session, user_id, mpesa_phone="12345")
    profile = await get_profile_for_user(async_session, user_id)
    assert profile.mpesa_phone is None
