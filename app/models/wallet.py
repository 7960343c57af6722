"""
Wallet model matching the DDL schema
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Numeric, DateTime, CheckConstraint, ForeignKey, Uuid
from sqlalchemy.sql import func
from app.db.base import Base
import uuid


class Wallet(Base):
    """Wallet model - matches wallets table in DDL"""
    __tablename__ = "wallets"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    balance = Column(Numeric(14, 2), nullable=False, default=0)
    total_earned = Column(Numeric(14, 2), nullable=False, default=0)
    total_staked = Column(Numeric(14, 2), nullable=False, default=0)
    total_lost = Column(Numeric(14, 2), nullable=False, default=0)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Constraints
    __table_args__ = (
        CheckConstraint('balance >= 0', name='chk_balance_nonneg'),
        CheckConstraint('total_earned >= 0', name='chk_earned_nonneg'),
        CheckConstraint('total_staked >= 0', name='chk_staked_nonneg'),
        CheckConstraint('total_lost >= 0', name='chk_lost_nonneg'),
    )

    def __repr__(self):
        return f"<Wallet(id={self.id}, user_id={self.user_id}, balance={self.balance})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "balance": str(self.balance),
            "total_earned": str(self.total_earned),
            "total_staked": str(self.total_staked),
            "total_lost": str(self.total_lost),
        }
