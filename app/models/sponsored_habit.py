"""
Sponsored habit model - brand challenges curated outside the app
"""

from datetime import datetime, timezone
from sqlalchemy import Column, String, Numeric, DateTime, Integer, Boolean, Text, Uuid
from sqlalchemy.sql import func
from app.db.base import Base
import uuid


class SponsoredHabit(Base):
    """Sponsored habit model - matches sponsored_habits table in DDL"""
    __tablename__ = "sponsored_habits"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    brand_name = Column(String(128), nullable=False)
    brand_logo = Column(String(512), nullable=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    reward_amount = Column(Numeric(14, 2), nullable=False, default=0)
    duration_days = Column(Integer, nullable=False)
    participants_count = Column(Integer, nullable=False, default=0)
    rating = Column(Numeric(3, 2), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<SponsoredHabit(id={self.id}, brand={self.brand_name}, title={self.title})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "brand_name": self.brand_name,
            "brand_logo": self.brand_logo,
            "title": self.title,
            "description": self.description,
            "reward_amount": str(self.reward_amount),
            "duration_days": self.duration_days,
            "participants_count": self.participants_count,
            "rating": str(self.rating),
            "is_active": self.is_active,
        }
