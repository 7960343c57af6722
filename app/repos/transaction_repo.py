"""
Transaction repository with CRUD operations
"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from app.models.enums import TransactionStatus, TransactionType
from app.models.transaction import Transaction


async def create_transaction(
    session: AsyncSession,
    user_id: UUID,
    tx_type: TransactionType,
    amount: Decimal,
    description: Optional[str] = None,
    habit_id: Optional[UUID] = None,
    status: TransactionStatus = TransactionStatus.COMPLETED,
    reference: Optional[str] = None
) -> Transaction:
    """
    Create a new transaction record.

    Args:
        session: Database session
        user_id: User UUID
        tx_type: Transaction type
        amount: Signed transaction amount
        description: Activity feed text (optional)
        habit_id: Related habit (optional)
        status: Ledger status (default: completed)
        reference: Gateway reference (optional)

    Returns:
        Created Transaction instance
    """
    transaction = Transaction(
        user_id=user_id,
        habit_id=habit_id,
        tx_type=TransactionType(tx_type).value,
        amount=amount,
        description=description,
        status=TransactionStatus(status).value,
        reference=reference
    )
    session.add(transaction)
    await session.flush()
    return transaction


async def get_transaction_by_id(session: AsyncSession, transaction_id: UUID) -> Optional[Transaction]:
    """
    Get transaction by ID.

    Args:
        session: Database session
        transaction_id: Transaction UUID

    Returns:
        Transaction instance or None if not found
    """
    result = await session.execute(
        select(Transaction).where(Transaction.id == transaction_id)
    )
    return result.scalar_one_or_none()


async def get_transaction_by_reference(
    session: AsyncSession,
    reference: str,
    for_update: bool = False
) -> Optional[Transaction]:
    """
    Get transaction by gateway reference.

    Args:
        session: Database session
        reference: Gateway reference (M-Pesa CheckoutRequestID)
        for_update: Lock the row for the rest of the database transaction

    Returns:
        Transaction instance or None if not found
    """
    query = select(Transaction).where(Transaction.reference == reference)
    if for_update:
        query = query.with_for_update()
    result = await session.execute(query)
    return result.scalar_one_or_none()


async def get_transactions_by_user(
    session: AsyncSession,
    user_id: UUID,
    limit: int = 20,
    offset: int = 0
) -> List[Transaction]:
    """
    Get transactions for a specific user, newest first.

    Args:
        session: Database session
        user_id: User UUID
        limit: Maximum number of transactions to return
        offset: Number of transactions to skip

    Returns:
        List of Transaction instances
    """
    result = await session.execute(
        select(Transaction)
        .where(Transaction.user_id == user_id)
        .order_by(desc(Transaction.created_at))
        .limit(limit)
        .offset(offset)
    )
    return list(result.scalars().all())


async def get_pending_deposits(
    session: AsyncSession,
    created_before: datetime,
    limit: int = 100
) -> List[Transaction]:
    """
    Get deposits still waiting for gateway confirmation.

    Args:
        session: Database session
        created_before: Only deposits created before this instant
        limit: Maximum number of transactions to return

    Returns:
        List of Transaction instances, oldest first
    """
    result = await session.execute(
        select(Transaction)
        .where(
            Transaction.tx_type == TransactionType.DEPOSIT.value,
            Transaction.status == TransactionStatus.PENDING.value,
            Transaction.reference.is_not(None),
            Transaction.created_at < created_before
        )
        .order_by(Transaction.created_at)
        .limit(limit)
    )
    return list(result.scalars().all())
