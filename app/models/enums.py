"""
Database enums matching the DDL schema
"""

import enum


class TransactionType(str, enum.Enum):
    """Ledger entry kind"""
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    STAKE = "stake"
    REWARD = "reward"
    LOSS = "loss"
    REFUND = "refund"


class TransactionStatus(str, enum.Enum):
    """Ledger entry status - only completed entries move the balance"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
