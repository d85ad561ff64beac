"""Profile per authenticated user. id is the auth subject (JWT sub); role drives authorization."""
from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from app.db.base import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(String(36), primary_key=True)
    email = Column(String(320), nullable=True)
    role = Column(String(16), nullable=False, default="basic", server_default="basic")
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
