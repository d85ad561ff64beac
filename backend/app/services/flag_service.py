"""
Event flags: users request corrections to a happening; curators resolve or reject them.
"""
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.orm import Session

from app.core.constants import FLAG_PENDING, FLAG_REJECTED, FLAG_RESOLVED, FLAGS_LIST_LIMIT
from app.models.event_flag import EventFlag
from app.models.happening import Happening
from app.models.user_profile import UserProfile

logger = logging.getLogger(__name__)


def flag_to_dict(r: EventFlag, happening_title: str | None = None) -> dict[str, Any]:
    return {
        "id": r.id,
        "happening_id": r.happening_id,
        "happening_title": happening_title,
        "flagger_user_id": r.flagger_user_id,
        "changes_requested": r.changes_requested,
        "status": r.status,
        "created_at": r.created_at.isoformat() if r.created_at else None,
        "updated_at": r.updated_at.isoformat() if r.updated_at else None,
        "resolved_by_user_id": r.resolved_by_user_id,
        "resolved_at": r.resolved_at.isoformat() if r.resolved_at else None,
    }


def create_flag(db: Session, user: UserProfile, happening_id: str, changes_requested: str) -> EventFlag | None:
    """Returns None if the happening does not exist. Raises ValueError on an empty request."""
    text = (changes_requested or "").strip()
    if not text:
        raise ValueError("changes_requested is required")
    if not db.get(Happening, happening_id):
        return None
    row = EventFlag(
        happening_id=happening_id,
        flagger_user_id=user.id,
        changes_requested=text,
        status=FLAG_PENDING,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Flag %s raised on happening %s by %s", row.id, happening_id, user.id)
    return row


def list_flags(db: Session, *, status: str | None = None, limit: int = 100) -> list[dict[str, Any]]:
    """Newest first, with the flagged happening's title."""
    q = db.query(EventFlag, Happening.title).outerjoin(Happening, Happening.id == EventFlag.happening_id)
    if status:
        q = q.filter(EventFlag.status == status)
    rows = q.order_by(EventFlag.created_at.desc()).limit(min(limit, FLAGS_LIST_LIMIT)).all()
    return [flag_to_dict(flag, title) for flag, title in rows]


def resolve_flag(db: Session, user: UserProfile, flag_id: str, status: str) -> EventFlag | None:
    """Mark a flag resolved or rejected, recording who did it and when. None if not found."""
    if status not in (FLAG_RESOLVED, FLAG_REJECTED):
        raise ValueError(f"Status must be one of: {FLAG_RESOLVED}, {FLAG_REJECTED}")
    row = db.get(EventFlag, flag_id)
    if not row:
        return None
    now = datetime.now(timezone.utc)
    row.status = status
    row.resolved_by_user_id = user.id
    row.resolved_at = now
    row.updated_at = now
    db.commit()
    db.refresh(row)
    logger.info("Flag %s %s by %s", flag_id, status, user.id)
    return row
