from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.sql import func

from app.db.base import Base


class UserAttendance(Base):
    __tablename__ = "user_attendance"

    user_id = Column(String(36), primary_key=True)
    happening_id = Column(String(36), ForeignKey("happenings.id", ondelete="CASCADE"), primary_key=True, index=True)
    status = Column(String(16), nullable=False)  # going | maybe_going
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
