"""
Withdrawal flow: debit the wallet and remember the payout number
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import NotFound, ValidationError
from app.db.session import atomic
from app.models.enums import TransactionType
from app.models.transaction import Transaction
from app.repos.profile_repo import get_profile_for_user, update_profile_fields
from app.repos.wallet_repo import apply_ledger_entry
from app.services.deposits import parse_amount
from app.services.phone import format_kenyan_mobile, is_valid_kenyan_mobile

# Configure logging
logger = logging.getLogger(__name__)


async def withdraw(
    session: AsyncSession,
    user_id: UUID,
    amount: Any,
    phone: str
) -> Transaction:
    """
    Withdraw funds from the user's wallet to an M-Pesa number.

    The debit and the profile's payout number are saved together. The
    payout itself is not sent to the M-Pesa network.

    Args:
        session: Database session
        user_id: User UUID
        amount: Amount to withdraw (>= minimum withdrawal)
        phone: Kenyan mobile number in any accepted format

    Returns:
        The withdrawal Transaction

    Raises:
        ValidationError: amount below minimum or invalid phone
        InsufficientBalance: amount exceeds the wallet balance
    """
    amount = parse_amount(amount)
    if amount < settings.min_withdrawal:
        raise ValidationError(f"Minimum withdrawal is {settings.currency} {settings.min_withdrawal}")
    if not is_valid_kenyan_mobile(phone):
        raise ValidationError("Please enter a valid Kenyan phone number")

    formatted_phone = format_kenyan_mobile(phone)

    async with atomic(session, "withdraw"):
        transaction = await apply_ledger_entry(
            session,
            user_id,
            -amount,
            TransactionType.WITHDRAWAL,
            f"M-Pesa withdrawal to {phone.strip()}"
        )
        profile = await get_profile_for_user(session, user_id)
        if not profile:
            raise NotFound("Profile not found")
        await update_profile_fields(session, profile, mpesa_phone=formatted_phone)

    logger.info(f"User {user_id} withdrew {amount} to {formatted_phone}")
    return transaction
