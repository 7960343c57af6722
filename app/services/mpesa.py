"""
M-Pesa Daraja gateway client for STK push deposits
"""

import base64
import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

import httpx

from app.core.config import settings
from app.core.exceptions import GatewayError

# Configure logging
logger = logging.getLogger(__name__)

# Daraja timestamps are East Africa Time
DARAJA_TZ = ZoneInfo("Africa/Nairobi")

# STK query answer while the customer has not acted on the prompt yet
STK_STILL_PROCESSING = "500.001.1001"


class DarajaGateway:
    """Thin async client over the Daraja OAuth, STK push and STK query endpoints"""

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        passkey: str,
        shortcode: str,
        callback_url: str,
        base_url: str = "https://sandbox.safaricom.co.ke",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.passkey = passkey
        self.shortcode = shortcode
        self.callback_url = callback_url
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    @staticmethod
    def timestamp(now: Optional[datetime] = None) -> str:
        now = now or datetime.now(DARAJA_TZ)
        return now.strftime("%Y%m%d%H%M%S")

    def password(self, timestamp: str) -> str:
        raw = f"{self.shortcode}{self.passkey}{timestamp}"
        return base64.b64encode(raw.encode()).decode()

    async def get_access_token(self, client: httpx.AsyncClient) -> str:
        """
        Fetch an OAuth access token with client credentials.

        Raises:
            GatewayError: token endpoint unreachable or refused the credentials
        """
        try:
            response = await client.get(
                "/oauth/v1/generate",
                params={"grant_type": "client_credentials"},
                auth=(self.consumer_key, self.consumer_secret)
            )
        except httpx.HTTPError as e:
            logger.error(f"M-Pesa token request failed: {e}")
            raise GatewayError("M-Pesa authentication failed", status_code=500)

        if response.status_code != 200:
            logger.error(f"Failed to get M-Pesa token: {response.status_code} {response.text}")
            raise GatewayError("M-Pesa authentication failed", status_code=500)

        token = response.json().get("access_token")
        if not token:
            logger.error("M-Pesa token response has no access_token")
            raise GatewayError("M-Pesa authentication failed", status_code=500)
        return token

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        async with self._client() as client:
            token = await self.get_access_token(client)
            try:
                response = await client.post(
                    path,
                    json=payload,
                    headers={"Authorization": f"Bearer {token}"}
                )
            except httpx.HTTPError as e:
                logger.error(f"M-Pesa request to {path} failed: {e}")
                raise GatewayError("Could not reach M-Pesa, please try again", status_code=500)

        try:
            return response.json()
        except ValueError:
            logger.error(f"M-Pesa returned non-JSON response from {path}: {response.status_code} {response.text}")
            raise GatewayError("Unexpected response from M-Pesa", status_code=500)

    async def stk_push(self, phone: str, amount: Decimal, reference: str = "StakeHabit") -> Dict[str, Any]:
        """
        Send an STK push (Lipa na M-Pesa Online) prompt to the customer's phone.

        Args:
            phone: Normalized 254XXXXXXXXX number
            amount: Amount in KSH, rounded to whole shillings
            reference: Account reference shown to the customer

        Returns:
            Raw Daraja response. ``ResponseCode == "0"`` means accepted.
        """
        timestamp = self.timestamp()
        payload = {
            "BusinessShortCode": self.shortcode,
            "Password": self.password(timestamp),
            "Timestamp": timestamp,
            "TransactionType": "CustomerPayBillOnline",
            "Amount": int(Decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
            "PartyA": phone,
            "PartyB": self.shortcode,
            "PhoneNumber": phone,
            "CallBackURL": self.callback_url,
            "AccountReference": reference,
            "TransactionDesc": "Deposit to StakeHabit wallet",
        }
        result = await self._post("/mpesa/stkpush/v1/processrequest", payload)
        logger.info(f"STK push result: {result}")
        return result

    async def query_stk_status(self, checkout_request_id: str) -> Dict[str, Any]:
        """
        Ask Daraja for the outcome of an earlier STK push.

        Returns:
            Raw Daraja response. ``ResultCode`` is present once the customer
            has accepted, cancelled or timed out.
        """
        timestamp = self.timestamp()
        payload = {
            "BusinessShortCode": self.shortcode,
            "Password": self.password(timestamp),
            "Timestamp": timestamp,
            "CheckoutRequestID": checkout_request_id,
        }
        return await self._post("/mpesa/stkpushquery/v1/query", payload)


def default_callback_url() -> str:
    url = settings.mpesa_callback_url or f"{settings.public_base_url.rstrip('/')}{settings.api_v1_prefix}/webhooks/mpesa"
    if settings.mpesa_callback_token and "token=" not in url:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}token={settings.mpesa_callback_token}"
    return url


def get_payment_gateway() -> Optional[DarajaGateway]:
    """
    Build the configured gateway, or None when M-Pesa credentials are
    missing and deposits run in demo mode.
    """
    if not settings.mpesa_configured:
        return None
    return DarajaGateway(
        consumer_key=settings.mpesa_consumer_key,
        consumer_secret=settings.mpesa_consumer_secret,
        passkey=settings.mpesa_passkey,
        shortcode=settings.mpesa_shortcode,
        callback_url=default_callback_url(),
        base_url=settings.mpesa_base_url,
        timeout=settings.mpesa_timeout_seconds
    )
