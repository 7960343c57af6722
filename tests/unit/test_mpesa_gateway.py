"""
Unit tests for the Daraja gateway client
"""

import base64
import pytest
from datetime import datetime
from decimal import Decimal

from app.core.exceptions import GatewayError
from app.services import mpesa
from app.services.mpesa import DarajaGateway, default_callback_url, get_payment_gateway
from tests.fixtures.mpesa import CHECKOUT_REQUEST_ID, FakeDaraja, QUERY_SUCCESS, STK_REJECTED


def test_timestamp_format():
    assert DarajaGateway.timestamp(datetime(2026, 10, 17, 9, 5, 3)) == "20261017090503"


def test_password_is_base64_of_shortcode_passkey_timestamp():
    gateway = FakeDaraja().gateway()
    password = gateway.password("20261017090503")
    assert base64.b64decode(password).decode() == "174379passkey20261017090503"


@pytest.mark.asyncio
async def test_stk_push_sends_expected_payload():
    fake = FakeDaraja()
    result = await fake.gateway().stk_push("254712345678", Decimal("100.40"))

    assert result["CheckoutRequestID"] == CHECKOUT_REQUEST_ID

    token_request = fake.requests_to("/oauth/v1/generate")[0]
    assert token_request.url.params["grant_type"] == "client_credentials"
    assert token_request.headers["Authorization"].startswith("Basic ")

    push_request = fake.requests_to("/mpesa/stkpush/v1/processrequest")[0]
    assert push_request.headers["Authorization"] == "Bearer test-token"
    payload = fake.last_json("/mpesa/stkpush/v1/processrequest")
    assert payload["BusinessShortCode"] == "174379"
    assert payload["TransactionType"] == "CustomerPayBillOnline"
    assert payload["Amount"] == 100
    assert payload["PartyA"] == "254712345678"
    assert payload["PhoneNumber"] == "254712345678"
    assert payload["PartyB"] == "174379"
    assert payload["AccountReference"] == "StakeHabit"
    assert payload["CallBackURL"] == "https://stakehabit.example/api/v1/webhooks/mpesa"
    assert len(payload["Timestamp"]) == 14
    assert base64.b64decode(payload["Password"]).decode() == f"174379passkey{payload['Timestamp']}"


@pytest.mark.asyncio
async def test_stk_push_amount_rounds_half_up():
    fake = FakeDaraja()
    await fake.gateway().stk_push("254712345678", Decimal("10.50"))
    assert fake.last_json("/mpesa/stkpush/v1/processrequest")["Amount"] == 11


@pytest.mark.asyncio
async def test_rejected_push_returns_raw_response():
    fake = FakeDaraja(stk_response=STK_REJECTED, stk_status=400)
    result = await fake.gateway().stk_push("254712345678", Decimal("100"))
    assert result["errorMessage"] == "Bad Request - Invalid PhoneNumber"


@pytest.mark.asyncio
async def test_token_failure_raises_gateway_error():
    fake = FakeDaraja(token_status=401)
    with pytest.raises(GatewayError) as exc_info:
        await fake.gateway().stk_push("254712345678", Decimal("100"))
    assert exc_info.value.message == "M-Pesa authentication failed"
    assert exc_info.value.status_code == 500
    assert not fake.requests_to("/mpesa/stkpush/v1/processrequest")


@pytest.mark.asyncio
async def test_query_stk_status():
    fake = FakeDaraja(query_response=QUERY_SUCCESS)
    result = await fake.gateway().query_stk_status(CHECKOUT_REQUEST_ID)
    assert result["ResultCode"] == "0"
    assert fake.last_json("/mpesa/stkpushquery/v1/query")["CheckoutRequestID"] == CHECKOUT_REQUEST_ID


def test_gateway_not_configured_means_demo_mode(monkeypatch):
    monkeypatch.setattr(mpesa.settings, "mpesa_consumer_key", None)
    assert get_payment_gateway() is None


def test_gateway_configured(monkeypatch):
    monkeypatch.setattr(mpesa.settings, "mpesa_consumer_key", "key")
    monkeypatch.setattr(mpesa.settings, "mpesa_consumer_secret", "secret")
    monkeypatch.setattr(mpesa.settings, "mpesa_passkey", "passkey")
    gateway = get_payment_gateway()
    assert isinstance(gateway, DarajaGateway)
    assert gateway.shortcode == "174379"


def test_default_callback_url_carries_token(monkeypatch):
    monkeypatch.setattr(mpesa.settings, "mpesa_callback_url", None)
    monkeypatch.setattr(mpesa.settings, "public_base_url", "https://api.stakehabit.example/")
    monkeypatch.setattr(mpesa.settings, "mpesa_callback_token", "s3cret")
    assert default_callback_url() == "https://api.stakehabit.example/api/v1/webhooks/mpesa?token=s3cret"
