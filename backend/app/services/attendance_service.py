"""
Attendance: one row per (user, happening) with status going | maybe_going.
"""
from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.constants import ATTENDANCE_GOING, ATTENDANCE_MAYBE, ATTENDANCE_STATUSES
from app.models.user_attendance import UserAttendance


def get_status(db: Session, user_id: str, happening_id: str) -> str | None:
    row = db.get(UserAttendance, (user_id, happening_id))
    return row.status if row else None


def set_status(db: Session, user_id: str, happening_id: str, status: str) -> UserAttendance:
    """Insert or update the caller's attendance."""
    if status not in ATTENDANCE_STATUSES:
        raise ValueError(f"Status must be one of: {', '.join(ATTENDANCE_STATUSES)}")
    row = db.get(UserAttendance, (user_id, happening_id))
    if row:
        row.status = status
        row.updated_at = datetime.now(timezone.utc)
    else:
        row = UserAttendance(user_id=user_id, happening_id=happening_id, status=status)
        db.add(row)
    db.commit()
    db.refresh(row)
    return row


def clear_status(db: Session, user_id: str, happening_id: str) -> bool:
    deleted = (
        db.query(UserAttendance)
        .filter(UserAttendance.user_id == user_id, UserAttendance.happening_id == happening_id)
        .delete()
    )
    db.commit()
    return bool(deleted)


def get_counts(db: Session, happening_id: str) -> dict[str, int]:
    rows = (
        db.query(UserAttendance.status, func.count())
        .filter(UserAttendance.happening_id == happening_id)
        .group_by(UserAttendance.status)
        .all()
    )
    counts = {ATTENDANCE_GOING: 0, ATTENDANCE_MAYBE: 0}
    for status, n in rows:
        counts[status] = n
    return counts
