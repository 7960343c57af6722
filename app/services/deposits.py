"""
Deposit flow: M-Pesa STK push initiation, demo-mode credit and
confirmation of pending deposits
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import GatewayError, ValidationError
from app.db.session import atomic
from app.models.enums import TransactionStatus, TransactionType
from app.models.transaction import Transaction
from app.repos.transaction_repo import create_transaction, get_pending_deposits, get_transaction_by_reference
from app.repos.wallet_repo import apply_ledger_entry, apply_to_wallet, lock_wallet, to_cents
from app.services.mpesa import STK_STILL_PROCESSING, DarajaGateway
from app.services.phone import normalize_phone

# Configure logging
logger = logging.getLogger(__name__)

SHILLINGS = Decimal("1")


@dataclass
class DepositResult:
    success: bool
    message: str
    demo: bool = False
    checkout_request_id: Optional[str] = None


def parse_amount(value: Any) -> Decimal:
    """Parse a user-supplied amount, raising ValidationError unless it is a finite number of whole cents."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Please enter a valid amount")
    if not amount.is_finite():
        raise ValidationError("Please enter a valid amount")
    return to_cents(amount)


async def initiate_deposit(
    session: AsyncSession,
    user_id: UUID,
    phone: str,
    amount: Any,
    gateway: Optional[DarajaGateway]
) -> DepositResult:
    """
    Start a deposit into the user's wallet.

    With no gateway configured the wallet is credited immediately (demo
    mode). Otherwise an STK push is sent and a pending deposit recorded;
    the wallet is credited only when the payment is confirmed.

    Raises:
        ValidationError: amount below the minimum or unusable phone number
        GatewayError: M-Pesa refused or could not be reached
    """
    amount = parse_amount(amount)
    if amount < settings.min_deposit:
        raise ValidationError(f"Minimum deposit is {settings.currency} {settings.min_deposit}")
    if not phone or len(re.sub(r"\D", "", phone)) < 9:
        raise ValidationError("Please enter a valid M-Pesa phone number")

    phone = normalize_phone(phone)
    logger.info(f"Deposit request - Phone: {phone}, Amount: {amount}, User: {user_id}")

    if gateway is None:
        # Sandbox-only path: no payment is collected
        logger.warning(f"M-Pesa not configured - simulating deposit of {amount} for user {user_id}")
        async with atomic(session, "demo deposit"):
            await apply_ledger_entry(
                session,
                user_id,
                amount,
                TransactionType.DEPOSIT,
                f"M-Pesa deposit (Demo) - {phone}"
            )
        return DepositResult(success=True, demo=True, message="Demo deposit credited to your wallet")

    # M-Pesa only collects whole shillings; record exactly what is requested
    amount = amount.quantize(SHILLINGS, rounding=ROUND_HALF_UP)
    result = await gateway.stk_push(phone, amount)
    if str(result.get("ResponseCode")) != "0":
        error = result.get("errorMessage") or result.get("ResponseDescription") or "STK push failed"
        logger.warning(f"STK push rejected for user {user_id}: {error}")
        raise GatewayError(error, status_code=400)

    checkout_request_id = result.get("CheckoutRequestID")
    if not checkout_request_id:
        logger.error(f"STK push accepted without CheckoutRequestID: {result}")
        raise GatewayError("STK push failed", status_code=500)

    async with atomic(session, "record pending deposit"):
        await create_transaction(
            session=session,
            user_id=user_id,
            tx_type=TransactionType.DEPOSIT,
            amount=amount,
            description=f"M-Pesa deposit pending - {checkout_request_id}",
            status=TransactionStatus.PENDING,
            reference=checkout_request_id
        )

    return DepositResult(
        success=True,
        checkout_request_id=checkout_request_id,
        message="STK push sent to your phone"
    )


async def confirm_deposit(
    session: AsyncSession,
    checkout_request_id: str,
    result_code: int,
    result_desc: Optional[str] = None,
    receipt: Optional[str] = None,
    paid_amount: Optional[Any] = None
) -> Optional[Transaction]:
    """
    Settle a pending deposit with the gateway's final answer.

    Result code 0 credits the wallet and completes the transaction; any
    other code marks it failed. When the gateway reports the amount it
    collected, that amount is credited. Deposits that are unknown or no
    longer pending are left untouched, so repeated callbacks are harmless.

    Returns:
        The settled Transaction, or None when nothing was changed
    """
    async with atomic(session, "confirm deposit"):
        transaction = await get_transaction_by_reference(session, checkout_request_id, for_update=True)
        if not transaction:
            logger.warning(f"Confirmation for unknown deposit {checkout_request_id}")
            return None
        if transaction.status != TransactionStatus.PENDING.value:
            logger.info(f"Deposit {checkout_request_id} already {transaction.status}, ignoring confirmation")
            return None

        if int(result_code) == 0:
            if paid_amount is not None:
                paid = to_cents(paid_amount)
                if paid != transaction.amount:
                    logger.warning(f"Deposit {checkout_request_id} requested {transaction.amount} but {paid} was paid")
                    transaction.amount = paid
            wallet = await lock_wallet(session, transaction.user_id)
            new_balance = apply_to_wallet(wallet, transaction.amount, TransactionType.DEPOSIT)
            transaction.status = TransactionStatus.COMPLETED.value
            transaction.description = f"M-Pesa deposit - {receipt or checkout_request_id}"
            logger.info(f"Deposit {checkout_request_id} confirmed: credited {transaction.amount} to user {transaction.user_id}. New balance: {new_balance}")
        else:
            transaction.status = TransactionStatus.FAILED.value
            transaction.description = f"M-Pesa deposit failed - {result_desc or result_code}"
            logger.info(f"Deposit {checkout_request_id} failed: {result_desc}")
        await session.flush()

    return transaction


async def get_deposit_status(
    session: AsyncSession,
    user_id: UUID,
    checkout_request_id: str
) -> Optional[Transaction]:
    transaction = await get_transaction_by_reference(session, checkout_request_id)
    if not transaction or transaction.user_id != user_id:
        return None
    return transaction


async def reconcile_pending_deposits(
    session: AsyncSession,
    gateway: DarajaGateway,
    older_than_seconds: Optional[int] = None
) -> Dict[str, int]:
    """
    Query the gateway for deposits whose callback never arrived and settle
    the ones with a final answer.

    Returns:
        Counts of completed, failed and still pending deposits
    """
    age = older_than_seconds if older_than_seconds is not None else settings.deposit_query_after_seconds
    cutoff = datetime.now(timezone.utc) - timedelta(seconds=age)
    pending = await get_pending_deposits(session, created_before=cutoff)
    references = [tx.reference for tx in pending]
    # Release the read transaction before calling out to the gateway
    await session.rollback()

    summary = {"completed": 0, "failed": 0, "pending": 0}
    for reference in references:
        try:
            result = await gateway.query_stk_status(reference)
        except GatewayError as e:
            logger.error(f"STK query for {reference} failed: {e.message}")
            summary["pending"] += 1
            continue

        if "ResultCode" not in result or result.get("errorCode") == STK_STILL_PROCESSING:
            summary["pending"] += 1
            continue

        transaction = await confirm_deposit(
            session,
            reference,
            int(result["ResultCode"]),
            result.get("ResultDesc")
        )
        if transaction is None:
            continue
        if transaction.status == TransactionStatus.COMPLETED.value:
            summary["completed"] += 1
        else:
            summary["failed"] += 1

    logger.info(f"Reconciled pending deposits: {summary}")
    return summary
