"""
Integration tests for authentication API endpoints
"""

import pytest

from app.core.auth import create_refresh_token


async def signup_and_login(client, email="njeri@example.com", password="secret123"):
    response = await client.post("/api/v1/auth/signup", json={"email": email, "password": password})
    assert response.status_code == 201
    return response.json()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_signup_returns_tokens_and_funds_wallet(test_client):
    tokens = await signup_and_login(test_client)
    assert tokens["token_type"] == "bearer"
    assert tokens["expires_in"] == 3600

    headers = {"Authorization": f"Bearer {tokens['access_token']}"}
    me = await test_client.get("/api/v1/auth/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["email"] == "njeri@example.com"

    wallet = await test_client.get("/api/v1/wallet/", headers=headers)
    assert wallet.status_code == 200
    assert wallet.json()["balance"] == "10000.00"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_signup_rejects_short_password(test_client):
    response = await test_client.post(
        "/api/v1/auth/signup",
        json={"email": "njeri@example.com", "password": "12345"}
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Password must be at least 6 characters"}


@pytest.mark.integration
@pytest.mark.asyncio
async def test_login(test_client):
    await signup_and_login(test_client)

    response = await test_client.post(
        "/api/v1/auth/login",
        json={"email": "njeri@example.com", "password": "secret123"}
    )
    assert response.status_code == 200
    assert response.json()["access_token"]

    response = await test_client.post(
        "/api/v1/auth/login",
        json={"email": "njeri@example.com", "password": "wrong-pass"}
    )
    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.integration
@pytest.mark.asyncio
async def test_refresh_token(test_client):
    tokens = await signup_and_login(test_client)

    response = await test_client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert response.status_code == 200

    # An access token is not accepted as a refresh token
    response = await test_client.post("/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert response.status_code == 401


@pytest.mark.integration
@pytest.mark.asyncio
async def test_protected_endpoints_require_token(test_client):
    assert (await test_client.get("/api/v1/wallet/")).status_code in (401, 403)

    bad = {"Authorization": "Bearer not-a-jwt"}
    assert (await test_client.get("/api/v1/habits/", headers=bad)).status_code == 401

    refresh_only = {"Authorization": f"Bearer {create_refresh_token({'sub': 'abc'})}"}
    assert (await test_client.get("/api/v1/profile/", headers=refresh_only)).status_code == 401
