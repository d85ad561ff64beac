"""
Custom instruction: URL pattern -> scraping configuration.

url_pattern: regex searched in the URL, or a wildcard pattern (`*`) matched against the whole URL.
priority: higher wins when several active patterns match.
use_playwright: render the page in headless Chromium before extraction.
"""
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from app.db.base import Base, new_uuid


class CustomInstruction(Base):
    __tablename__ = "custom_instructions"

    id = Column(String(36), primary_key=True, default=new_uuid)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    url_pattern = Column(String(1024), nullable=False)
    use_playwright = Column(Boolean, nullable=False, default=False, server_default="false")
    instructions_text = Column(Text, nullable=True)
    priority = Column(Integer, nullable=False, default=0, server_default="0", index=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default="true")
