"""Happening: one community event. Moderated via status (pending | approved | rejected)."""
from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func

from app.db.base import Base, new_uuid


class Happening(Base):
    __tablename__ = "happenings"

    id = Column(String(36), primary_key=True, default=new_uuid)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    title = Column(String(512), nullable=False)
    description = Column(Text, nullable=True)
    start_datetime = Column(DateTime(timezone=True), nullable=False, index=True)
    end_datetime = Column(DateTime(timezone=True), nullable=True)
    location = Column(String(512), nullable=True)
    source_url = Column(Text, nullable=True)
    submitter_user_id = Column(String(36), nullable=False, index=True)
    status = Column(String(16), nullable=False, default="pending", server_default="pending", index=True)
    scrape_log_id = Column(String(36), ForeignKey("scrape_logs.id", ondelete="SET NULL"), nullable=True)
