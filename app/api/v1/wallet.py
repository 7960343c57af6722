"""
Wallet API endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_current_user
from app.db.session import get_db
from app.models.user import User
from app.repos.transaction_repo import get_transactions_by_user
from app.repos.wallet_repo import get_wallet_for_user
from app.services.deposits import get_deposit_status, initiate_deposit
from app.services.mpesa import DarajaGateway, get_payment_gateway
from app.services.withdrawals import withdraw

router = APIRouter()


class WalletBalance(BaseModel):
    """Wallet balance response model"""
    id: str
    balance: str
    total_earned: str
    total_staked: str
    total_lost: str


class TransactionItem(BaseModel):
    id: str
    habit_id: Optional[str] = None
    type: str
    amount: str
    description: Optional[str] = None
    status: str
    reference: Optional[str] = None
    created_at: Optional[str] = None


class DepositRequest(BaseModel):
    """Deposit request model"""
    phone: str = Field(..., description="M-Pesa phone number")
    amount: str = Field(..., description="Amount to deposit (KSH)")


class DepositResponse(BaseModel):
    success: bool
    message: str
    demo: bool = False
    checkout_request_id: Optional[str] = None


class DepositStatus(BaseModel):
    checkout_request_id: str
    status: str
    amount: str


class WithdrawalRequest(BaseModel):
    """Withdrawal request model"""
    amount: str = Field(..., description="Amount to withdraw (KSH)")
    phone: str = Field(..., description="M-Pesa phone number to pay out to")


class WithdrawalResponse(BaseModel):
    """Withdrawal response model"""
    success: bool
    transaction_id: str
    message: str


@router.get("/", response_model=WalletBalance)
async def get_wallet_balance(
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Get current user's wallet balance and totals.
    """
    wallet = await get_wallet_for_user(session, current_user.id)
    if not wallet:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Wallet not found"
        )
    return WalletBalance(**wallet.to_dict())


@router.get("/transactions", response_model=List[TransactionItem])
async def list_transactions(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Activity feed, newest first.
    """
    transactions = await get_transactions_by_user(session, current_user.id, limit=limit, offset=offset)
    return [TransactionItem(**tx.to_dict()) for tx in transactions]


@router.post("/deposit", response_model=DepositResponse)
async def create_deposit(
    deposit_data: DepositRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    gateway: Optional[DarajaGateway] = Depends(get_payment_gateway)
):
    """
    Start an M-Pesa deposit.

    Sends an STK push to the phone and records a pending deposit, or credits
    the wallet straight away when M-Pesa is not configured.
    """
    result = await initiate_deposit(
        session,
        current_user.id,
        deposit_data.phone,
        deposit_data.amount,
        gateway
    )
    return DepositResponse(
        success=result.success,
        message=result.message,
        demo=result.demo,
        checkout_request_id=result.checkout_request_id
    )


@router.get("/deposits/{checkout_request_id}", response_model=DepositStatus)
async def deposit_status(
    checkout_request_id: str,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Poll the status of an STK push deposit.
    """
    transaction = await get_deposit_status(session, current_user.id, checkout_request_id)
    if not transaction:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Deposit not found"
        )
    return DepositStatus(
        checkout_request_id=checkout_request_id,
        status=transaction.status,
        amount=str(transaction.amount)
    )


@router.post("/withdraw", response_model=WithdrawalResponse)
async def create_withdrawal(
    withdrawal_data: WithdrawalRequest,
    current_user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_db)
):
    """
    Withdraw funds to an M-Pesa number.
    """
    transaction = await withdraw(session, current_user.id, withdrawal_data.amount, withdrawal_data.phone)
    return WithdrawalResponse(
        success=True,
        transaction_id=str(transaction.id),
        message="Withdrawal processed"
    )
