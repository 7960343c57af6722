"""
Webhook endpoints for M-Pesa payment confirmations

Daraja posts the outcome of every STK push to the callback URL given at
initiation. The callback settles the matching pending deposit.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.metrics import DEPOSIT_COUNT, WEBHOOK_COUNT
from app.db.session import get_db
from app.models.enums import TransactionStatus
from app.services.deposits import confirm_deposit

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()


class CallbackItem(BaseModel):
    Name: str
    Value: Optional[Any] = None


class CallbackMetadata(BaseModel):
    Item: List[CallbackItem] = Field(default_factory=list)


# Alias so the StkCallback field of the same name does not shadow the type
CallbackMetadataModel = CallbackMetadata


class StkCallback(BaseModel):
    MerchantRequestID: Optional[str] = None
    CheckoutRequestID: str
    ResultCode: int
    ResultDesc: Optional[str] = None
    CallbackMetadata: Optional[CallbackMetadataModel] = None


class CallbackBody(BaseModel):
    stkCallback: StkCallback


class MpesaCallbackPayload(BaseModel):
    """Daraja STK push callback payload"""
    Body: CallbackBody


def callback_value(callback: StkCallback, name: str) -> Optional[Any]:
    if not callback.CallbackMetadata:
        return None
    for item in callback.CallbackMetadata.Item:
        if item.Name == name:
            return item.Value
    return None


@router.post("/webhooks/mpesa")
async def mpesa_callback(
    payload: MpesaCallbackPayload,
    token: Optional[str] = Query(None),
    session: AsyncSession = Depends(get_db)
) -> Dict[str, Any]:
    """
    Receive an STK push result and settle the pending deposit.

    Repeated or unknown callbacks are acknowledged without changes so
    Daraja stops retrying.
    """
    if settings.mpesa_callback_token and token != settings.mpesa_callback_token:
        WEBHOOK_COUNT.labels(status="rejected").inc()
        logger.warning("M-Pesa callback rejected: bad token")
        raise HTTPException(status_code=403, detail="Invalid callback token")

    callback = payload.Body.stkCallback
    receipt = callback_value(callback, "MpesaReceiptNumber")
    paid_amount = callback_value(callback, "Amount")
    logger.info(f"M-Pesa callback for {callback.CheckoutRequestID}: {callback.ResultCode} {callback.ResultDesc}")

    transaction = await confirm_deposit(
        session,
        callback.CheckoutRequestID,
        callback.ResultCode,
        callback.ResultDesc,
        receipt=str(receipt) if receipt is not None else None,
        paid_amount=paid_amount
    )

    if transaction is None:
        WEBHOOK_COUNT.labels(status="ignored").inc()
    else:
        WEBHOOK_COUNT.labels(status="processed").inc()
        outcome = "completed" if transaction.status == TransactionStatus.COMPLETED.value else "failed"
        DEPOSIT_COUNT.labels(status=outcome).inc()

    return {"ResultCode": 0, "ResultDesc": "Accepted"}
