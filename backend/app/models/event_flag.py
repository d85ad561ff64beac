"""User-submitted correction request against a happening."""
from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func

from app.db.base import Base, new_uuid


class EventFlag(Base):
    __tablename__ = "event_flags"

    id = Column(String(36), primary_key=True, default=new_uuid)
    happening_id = Column(String(36), ForeignKey("happenings.id", ondelete="CASCADE"), nullable=False, index=True)
    flagger_user_id = Column(String(36), nullable=False)
    changes_requested = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default="pending", server_default="pending", index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    resolved_by_user_id = Column(String(36), nullable=True)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
