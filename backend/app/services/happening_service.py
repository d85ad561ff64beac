"""
Happenings: list/query, create with role-based moderation status, edit, moderate, calendar and map views.
"""
import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.constants import (
    CURATOR_ROLES,
    HAPPENING_APPROVED,
    HAPPENING_PENDING,
    HAPPENING_SORT_FIELDS,
    HAPPENING_STATUSES,
    HAPPENINGS_LIST_LIMIT,
)
from app.models.event_flag import EventFlag
from app.models.happening import Happening
from app.models.user_attendance import UserAttendance
from app.models.user_profile import UserProfile
from app.services import geocoding

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "description", "start_datetime", "end_datetime", "location", "source_url")


def to_utc(dt: datetime | None) -> datetime | None:
    """Naive datetimes are taken as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _iso(dt: datetime | None) -> str | None:
    return to_utc(dt).isoformat() if dt else None


def happening_to_dict(r: Happening) -> dict[str, Any]:
    return {
        "id": r.id,
        "title": r.title,
        "description": r.description,
        "start_datetime": _iso(r.start_datetime),
        "end_datetime": _iso(r.end_datetime),
        "location": r.location,
        "source_url": r.source_url,
        "submitter_user_id": r.submitter_user_id,
        "status": r.status,
        "scrape_log_id": r.scrape_log_id,
        "created_at": _iso(r.created_at),
        "updated_at": _iso(r.updated_at),
    }


def list_happenings(
    db: Session,
    *,
    status: str | None = HAPPENING_APPROVED,
    start: datetime | None = None,
    end: datetime | None = None,
    submitter_user_id: str | None = None,
    query: str | None = None,
    search: str | None = None,
    sort_by: str = "start_datetime",
    sort_order: str = "asc",
    limit: int | None = None,
    capped: bool = True,
) -> list[Happening]:
    """
    `query` matches the title only; `search` matches title, description or location.
    With capped=False no row cap is applied (callers filtering further in memory slice afterwards).
    """
    q = db.query(Happening)
    if status:
        q = q.filter(Happening.status == status)
    if start:
        q = q.filter(Happening.start_datetime >= to_utc(start))
    if end:
        q = q.filter(Happening.start_datetime <= to_utc(end))
    if submitter_user_id:
        q = q.filter(Happening.submitter_user_id == submitter_user_id)
    if query and query.strip():
        q = q.filter(Happening.title.ilike(f"%{query.strip()}%"))
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        q = q.filter(or_(
            Happening.title.ilike(pattern),
            Happening.description.ilike(pattern),
            Happening.location.ilike(pattern),
        ))
    if sort_by not in HAPPENING_SORT_FIELDS:
        sort_by = "start_datetime"
    column = getattr(Happening, sort_by)
    q = q.order_by(column.desc() if sort_order == "desc" else column.asc())
    if capped:
        q = q.limit(min(limit or HAPPENINGS_LIST_LIMIT, HAPPENINGS_LIST_LIMIT))
    elif limit:
        q = q.limit(limit)
    return q.all()


def get_happening(db: Session, happening_id: str) -> Happening | None:
    return db.get(Happening, happening_id)


def can_view(row: Happening, user: UserProfile | None) -> bool:
    if row.status == HAPPENING_APPROVED:
        return True
    if user is None:
        return False
    return user.role in CURATOR_ROLES or row.submitter_user_id == user.id


def _check_times(start: datetime | None, end: datetime | None) -> None:
    if start and end and to_utc(end) < to_utc(start):
        raise ValueError("end_datetime must not be before start_datetime")


def create_happening(
    db: Session,
    user: UserProfile,
    *,
    title: str,
    start_datetime: datetime,
    description: str | None = None,
    end_datetime: datetime | None = None,
    location: str | None = None,
    source_url: str | None = None,
    scrape_log_id: str | None = None,
) -> Happening:
    """
    Curators and admins publish immediately; everyone else's submission waits for review.
    Raises ValueError on a blank title or an end before the start.
    """
    title = (title or "").strip()
    if not title:
        raise ValueError("title is required")
    _check_times(start_datetime, end_datetime)
    status = HAPPENING_APPROVED if user.role in CURATOR_ROLES else HAPPENING_PENDING
    row = Happening(
        title=title,
        description=(description or "").strip() or None,
        start_datetime=to_utc(start_datetime),
        end_datetime=to_utc(end_datetime),
        location=(location or "").strip() or None,
        source_url=(source_url or "").strip() or None,
        submitter_user_id=user.id,
        scrape_log_id=scrape_log_id or None,
        status=status,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Happening %s submitted by %s (%s)", row.id, user.id, status)
    return row


def update_happening(db: Session, happening_id: str, changes: dict[str, Any]) -> Happening | None:
    """Partial update of editable fields. Returns None if not found; ValueError on invalid values."""
    row = db.get(Happening, happening_id)
    if not row:
        return None
    values = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    if "title" in values:
        values["title"] = (values["title"] or "").strip()
        if not values["title"]:
            raise ValueError("title is required")
    if "start_datetime" in values:
        if values["start_datetime"] is None:
            raise ValueError("start_datetime is required")
        values["start_datetime"] = to_utc(values["start_datetime"])
    if "end_datetime" in values:
        values["end_datetime"] = to_utc(values["end_datetime"])
    _check_times(
        values.get("start_datetime", row.start_datetime),
        values.get("end_datetime", row.end_datetime),
    )
    for key, value in values.items():
        if isinstance(value, str) and key != "title":
            value = value.strip() or None
        setattr(row, key, value)
    row.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(row)
    return row


def set_status(db: Session, happening_id: str, status: str) -> Happening | None:
    if status not in HAPPENING_STATUSES:
        raise ValueError(f"Unknown status: {status}")
    row = db.get(Happening, happening_id)
    if not row:
        return None
    row.status = status
    row.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(row)
    logger.info("Happening %s -> %s", happening_id, status)
    return row


def list_pending(db: Session) -> list[dict[str, Any]]:
    """Moderation queue, newest first, with the submitter's role."""
    rows = (
        db.query(Happening, UserProfile.role)
        .outerjoin(UserProfile, UserProfile.id == Happening.submitter_user_id)
        .filter(Happening.status == HAPPENING_PENDING)
        .order_by(Happening.created_at.desc())
        .all()
    )
    return [{**happening_to_dict(h), "submitter_role": role} for h, role in rows]


def delete_happening(db: Session, happening_id: str) -> bool:
    row = db.get(Happening, happening_id)
    if not row:
        return False
    db.query(EventFlag).filter(EventFlag.happening_id == happening_id).delete()
    db.query(UserAttendance).filter(UserAttendance.happening_id == happening_id).delete()
    db.delete(row)
    db.commit()
    logger.info("Deleted happening %s", happening_id)
    return True


def get_calendar_month(db: Session, year: int, month: int) -> dict[str, Any]:
    """Approved happenings for one month grouped by start date (YYYY-MM-DD), plus per-day counts."""
    first = date(year, month, 1)
    next_first = date(year + (month == 12), month % 12 + 1, 1)
    rows = list_happenings(
        db,
        status=HAPPENING_APPROVED,
        start=datetime.combine(first, time.min, tzinfo=timezone.utc),
        end=datetime.combine(next_first, time.min, tzinfo=timezone.utc) - timedelta(microseconds=1),
    )
    days: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for r in rows:
        days[to_utc(r.start_datetime).date().isoformat()].append(happening_to_dict(r))
    return {
        "year": year,
        "month": month,
        "days": dict(days),
        "counts": {d: len(items) for d, items in days.items()},
    }


def get_geodata(rows: list[Happening]) -> dict[str, tuple[float, float]]:
    return geocoding.geocode_many({r.id: r.location for r in rows if r.location})


def to_feature_collection(rows: list[Happening], geodata: dict[str, tuple[float, float]]) -> dict[str, Any]:
    """GeoJSON FeatureCollection; happenings without coordinates are left off the map."""
    features = []
    for r in rows:
        coords = geodata.get(r.id)
        if coords is None:
            continue
        features.append({
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [coords[0], coords[1]]},
            "properties": {
                "id": r.id,
                "title": r.title,
                "location": r.location,
                "start_datetime": _iso(r.start_datetime),
            },
        })
    return {"type": "FeatureCollection", "features": features}
