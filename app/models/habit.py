"""
Habit model matching the DDL schema
"""

from datetime import datetime, timezone
from sqlalchemy import (
    Column, String, Numeric, DateTime, Date, Integer, Boolean, Text, ForeignKey, CheckConstraint, Uuid
)
from sqlalchemy.sql import func
from app.db.base import Base
import uuid


class Habit(Base):
    """Habit model - matches habits table in DDL"""
    __tablename__ = "habits"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    stake_amount = Column(Numeric(14, 2), nullable=False, default=0)
    duration_days = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    current_streak = Column(Integer, nullable=False, default=0)
    best_streak = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Constraints
    __table_args__ = (
        CheckConstraint('stake_amount >= 0', name='chk_stake_nonneg'),
        CheckConstraint('duration_days > 0', name='chk_duration_positive'),
        CheckConstraint('current_streak >= 0', name='chk_streak_nonneg'),
        CheckConstraint('best_streak >= current_streak', name='chk_best_streak'),
    )

    def __repr__(self):
        return f"<Habit(id={self.id}, name={self.name}, streak={self.current_streak}/{self.duration_days})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "stake_amount": str(self.stake_amount),
            "duration_days": self.duration_days,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "is_active": self.is_active,
            "is_completed": self.is_completed,
            "current_streak": self.current_streak,
            "best_streak": self.best_streak,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
