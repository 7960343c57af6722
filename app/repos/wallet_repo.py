"""
Wallet repository with atomic balance operations
"""

from typing import Optional
from uuid import UUID
from decimal import Decimal, InvalidOperation
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.core.exceptions import InsufficientBalance, NotFound, ValidationError
from app.models.enums import TransactionStatus, TransactionType
from app.models.transaction import Transaction
from app.models.wallet import Wallet
from app.repos.transaction_repo import create_transaction

# Configure logging
logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def to_cents(amount) -> Decimal:
    """Exact two-place value of an amount. Fractions of a cent raise ValidationError."""
    try:
        amount = Decimal(str(amount))
        cents = amount.quantize(CENTS)
    except (InvalidOperation, ValueError):
        raise ValidationError("Please enter a valid amount")
    if cents != amount:
        raise ValidationError("Amount cannot have more than 2 decimal places")
    return cents


async def get_wallet_for_user(session: AsyncSession, user_id: UUID) -> Optional[Wallet]:
    """
    Get wallet for a specific user.

    Args:
        session: Database session
        user_id: User UUID

    Returns:
        Wallet instance or None if not found
    """
    result = await session.execute(
        select(Wallet).where(Wallet.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def create_wallet_for_user(
    session: AsyncSession,
    user_id: UUID,
    starting_balance: Decimal = Decimal('0')
) -> Wallet:
    """
    Create a new wallet for a user.

    The wallet is flushed, not committed, so signup can create the user,
    profile and wallet as one unit.

    Args:
        session: Database session
        user_id: User UUID
        starting_balance: Signup bonus credited to the new wallet

    Returns:
        Created Wallet instance or existing wallet if one already exists
    """
    # Check if wallet already exists
    existing_wallet = await get_wallet_for_user(session, user_id)
    if existing_wallet:
        return existing_wallet

    wallet = Wallet(
        user_id=user_id,
        balance=starting_balance,
        total_earned=Decimal('0'),
        total_staked=Decimal('0'),
        total_lost=Decimal('0')
    )
    session.add(wallet)
    await session.flush()
    return wallet


async def lock_wallet(session: AsyncSession, user_id: UUID) -> Wallet:
    """Load the user's wallet with a row-level lock, raising NotFound if missing."""
    result = await session.execute(
        select(Wallet)
        .where(Wallet.user_id == user_id)
        .with_for_update()
    )
    wallet = result.scalar_one_or_none()
    if not wallet:
        raise NotFound("Wallet not found")
    return wallet


def apply_to_wallet(wallet: Wallet, amount: Decimal, tx_type: TransactionType) -> Decimal:
    """
    Move the balance of a locked wallet and bump the aggregate counter for
    the entry kind. Raises InsufficientBalance without touching the wallet
    when the balance would go negative.

    Returns:
        The new balance
    """
    amount = Decimal(amount).quantize(CENTS)
    new_balance = wallet.balance + amount
    if new_balance < 0:
        raise InsufficientBalance(required=abs(amount), available=wallet.balance)

    wallet.balance = new_balance
    if tx_type == TransactionType.STAKE:
        wallet.total_staked += abs(amount)
    elif tx_type == TransactionType.REWARD:
        wallet.total_earned += amount
    elif tx_type == TransactionType.LOSS:
        wallet.total_lost += abs(amount)
    return new_balance


async def apply_ledger_entry(
    session: AsyncSession,
    user_id: UUID,
    amount: Decimal,
    tx_type: TransactionType,
    description: str,
    habit_id: Optional[UUID] = None
) -> Transaction:
    """
    Apply one signed ledger entry: lock the wallet, move the balance and
    append the matching transaction row.

    Balance change and transaction insert share the caller's database
    transaction; nothing is committed here. The caller commits (or rolls
    back) together with whatever else belongs to the same user action.

    Args:
        session: Database session
        user_id: User UUID
        amount: Signed amount (negative for debits)
        tx_type: Entry kind
        description: Free-text description shown in the activity feed
        habit_id: Related habit (optional)

    Returns:
        Created Transaction instance

    Raises:
        NotFound: user has no wallet
        InsufficientBalance: entry would make the balance negative
    """
    amount = Decimal(amount).quantize(CENTS)
    wallet = await lock_wallet(session, user_id)
    new_balance = apply_to_wallet(wallet, amount, tx_type)

    transaction = await create_transaction(
        session=session,
        user_id=user_id,
        tx_type=tx_type,
        amount=amount,
        description=description,
        habit_id=habit_id,
        status=TransactionStatus.COMPLETED
    )

    logger.info(f"Applied {tx_type.value} of {amount} for user {user_id}. New balance: {new_balance}")
    return transaction
