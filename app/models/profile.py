"""
Profile model matching the DDL schema
"""

from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func
from app.db.base import Base
import uuid


class Profile(Base):
    """Profile model - matches profiles table in DDL"""
    __tablename__ = "profiles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    username = Column(String(64), nullable=True)
    mpesa_phone = Column(String(16), nullable=True)
    avatar_url = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self):
        return f"<Profile(user_id={self.user_id}, username={self.username}, mpesa_phone={self.mpesa_phone})>"

    def to_dict(self):
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "username": self.username,
            "mpesa_phone": self.mpesa_phone,
            "avatar_url": self.avatar_url,
        }
