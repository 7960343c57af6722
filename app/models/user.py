"""
User model matching the DDL schema
"""

from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, Boolean, Text, Uuid
from sqlalchemy.sql import func
from app.db.base import Base
import uuid


class User(Base):
    """User model - matches users table in DDL"""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
