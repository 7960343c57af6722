"""
Transaction model matching the DDL schema
"""

from datetime import datetime, timezone
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.sql import func
from app.db.base import Base
from app.models.enums import TransactionStatus
import uuid


class Transaction(Base):
    """Transaction model - append-only ledger entries"""
    __tablename__ = "transactions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    habit_id = Column(Uuid, ForeignKey("habits.id", ondelete="SET NULL"), nullable=True)
    tx_type = Column('type', String(16), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(16), nullable=False, default=TransactionStatus.COMPLETED.value)
    # Gateway reference (M-Pesa CheckoutRequestID) for deposits awaiting confirmation
    reference = Column(String(128), nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<Transaction(id={self.id}, user_id={self.user_id}, type={self.tx_type}, amount={self.amount}, status={self.status})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "habit_id": str(self.habit_id) if self.habit_id else None,
            "type": self.tx_type,
            "amount": str(self.amount),
            "description": self.description,
            "status": self.status,
            "reference": self.reference,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
