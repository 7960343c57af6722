"""
Habit completion log model matching the DDL schema
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Date, DateTime, Text, ForeignKey, UniqueConstraint, Uuid
from app.db.base import Base
import uuid


class HabitLog(Base):
    """One row per habit per calendar day"""
    __tablename__ = "habit_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    habit_id = Column(Uuid, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    completed_on = Column(Date, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    notes = Column(Text, nullable=True)

    # Constraints
    __table_args__ = (
        UniqueConstraint('habit_id', 'completed_on', name='uq_habit_log_day'),
    )

    def __repr__(self):
        return f"<HabitLog(habit_id={self.habit_id}, completed_on={self.completed_on})>"
