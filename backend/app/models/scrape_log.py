"""Audit record of one URL extraction attempt (success or failure)."""
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func

from app.db.base import Base, JSONType, new_uuid


class ScrapeLog(Base):
    __tablename__ = "scrape_logs"

    id = Column(String(36), primary_key=True, default=new_uuid)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    requested_by_user_id = Column(String(36), nullable=False, index=True)
    url_scraped = Column(Text, nullable=False)
    custom_instruction_id_used = Column(
        String(36), ForeignKey("custom_instructions.id", ondelete="SET NULL"), nullable=True
    )
    playwright_flag_used = Column(Boolean, nullable=False, default=False)
    raw_llm_response = Column(JSONType, nullable=True)
    parsed_event_data = Column(JSONType, nullable=True)
    error_message = Column(Text, nullable=True)
    is_reported_bad = Column(Boolean, nullable=False, default=False, server_default="false")
