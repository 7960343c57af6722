"""
Integration tests for wallet API endpoints
"""

import pytest

from app.services.mpesa import get_payment_gateway
from tests.fixtures.mpesa import CHECKOUT_REQUEST_ID, FakeDaraja, STK_REJECTED


@pytest.mark.integration
@pytest.mark.asyncio
async def test_wallet_balance_endpoint(test_client, auth_headers):
    response = await test_client.get("/api/v1/wallet/", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["balance"] == "10000.00"
    assert data["total_earned"] == "0.00"
    assert data["total_staked"] == "0.00"
    assert data["total_lost"] == "0.00"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_demo_deposit_endpoint(test_client, auth_headers):
    response = await test_client.post(
        "/api/v1/wallet/deposit",
        json={"phone": "0712345678", "amount": "150"},
        headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Demo deposit credited to your wallet",
        "demo": True,
        "checkout_request_id": None
    }

    wallet = await test_client.get("/api/v1/wallet/", headers=auth_headers)
    assert wallet.json()["balance"] == "10150.00"

    feed = await test_client.get("/api/v1/wallet/transactions", headers=auth_headers)
    assert feed.status_code == 200
    entries = feed.json()
    assert len(entries) == 1
    assert entries[0]["type"] == "deposit"
    assert entries[0]["amount"] == "150.00"
    assert entries[0]["status"] == "completed"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_deposit_below_minimum_endpoint(test_client, auth_headers):
    response = await test_client.post(
        "/api/v1/wallet/deposit",
        json={"phone": "0712345678", "amount": "5"},
        headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Minimum deposit is KSH 10"}
    feed = await test_client.get("/api/v1/wallet/transactions", headers=auth_headers)
    assert feed.json() == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_stk_push_deposit_and_status(test_app, test_client, auth_headers):
    fake = FakeDaraja()
    test_app.dependency_overrides[get_payment_gateway] = fake.gateway

    response = await test_client.post(
        "/api/v1/wallet/deposit",
        json={"phone": "0712345678", "amount": "100"},
        headers=auth_headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["demo"] is False
    assert body["checkout_request_id"] == CHECKOUT_REQUEST_ID

    status_response = await test_client.get(f"/api/v1/wallet/deposits/{CHECKOUT_REQUEST_ID}", headers=auth_headers)
    assert status_response.status_code == 200
    assert status_response.json()["status"] == "pending"

    wallet = await test_client.get("/api/v1/wallet/", headers=auth_headers)
    assert wallet.json()["balance"] == "10000.00"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_rejected_stk_push_endpoint(test_app, test_client, auth_headers):
    fake = FakeDaraja(stk_response=STK_REJECTED, stk_status=400)
    test_app.dependency_overrides[get_payment_gateway] = fake.gateway

    response = await test_client.post(
        "/api/v1/wallet/deposit",
        json={"phone": "0712345678", "amount": "100"},
        headers=auth_headers
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Bad Request - Invalid PhoneNumber"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_unknown_deposit_status(test_client, auth_headers):
    response = await test_client.get("/api/v1/wallet/deposits/ws_CO_missing", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.integration
@pytest.mark.asyncio
async def test_withdrawal_endpoint(test_client, auth_headers):
    response = await test_client.post(
        "/api/v1/wallet/withdraw",
        json={"amount": "500", "phone": "0712345678"},
        headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["success"] is True

    wallet = await test_client.get("/api/v1/wallet/", headers=auth_headers)
    assert wallet.json()["balance"] == "9500.00"
    profile = await test_client.get("/api/v1/profile/", headers=auth_headers)
    assert profile.json()["mpesa_phone"] == "254712345678"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_withdrawal_over_balance_endpoint(test_client, auth_headers):
    response = await test_client.post(
        "/api/v1/wallet/withdraw",
        json={"amount": "20000", "phone": "0712345678"},
        headers=auth_headers
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Insufficient balance"
