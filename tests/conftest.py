"""
Test configuration and fixtures for StakeHabit

This module provides shared fixtures for database and application testing.
Every test gets its own in-memory SQLite database with tables created from
the ORM metadata.

Usage:
    pytest tests/
"""

import os

# Configure the app for tests before anything imports the settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_ENV"] = "testing"
os.environ["RATE_LIMIT_ENABLED"] = "false"
for _key in ("MPESA_CONSUMER_KEY", "MPESA_CONSUMER_SECRET", "MPESA_PASSKEY", "MPESA_CALLBACK_TOKEN", "SENTRY_DSN"):
    os.environ.pop(_key, None)

import pytest
from typing import AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient
from fastapi import FastAPI

from app.core.auth import create_access_token
from app.db.base import Base
from app.db.session import get_db
from app.main import app
from app.models.user import User
from app.services.accounts import signup
from app.services.mpesa import get_payment_gateway


@pytest.fixture
async def db_engine():
    """
    Create an in-memory database engine with all tables.

    StaticPool keeps the single in-memory connection alive for the whole test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False}
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def async_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Database session for service and repository tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def test_app(session_factory) -> FastAPI:
    """
    FastAPI app with the database dependency pointed at the test engine and
    deposits in demo mode.
    """
    async def get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = get_test_db
    app.dependency_overrides[get_payment_gateway] = lambda: None
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def test_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """HTTP test client for API testing."""
    async with AsyncClient(transport=ASGITransport(app=test_app), base_url="http://test") as client:
        yield client


# Test data fixtures
@pytest.fixture
async def test_user(async_session: AsyncSession) -> User:
    """Signed-up user with profile and the starting wallet balance."""
    return await signup(async_session, "wanjiku@example.com", "secret123", username="wanjiku")


@pytest.fixture
def auth_headers(test_user: User) -> Dict[str, str]:
    token = create_access_token(data={"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}
