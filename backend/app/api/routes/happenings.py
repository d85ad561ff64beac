"""
Happenings API: browse, submit, edit, moderate, attendance, calendar and map.

Approved happenings are public. Submitting needs submitter or above; editing and moderation
need curator or admin; deleting needs admin.
"""
import logging
from datetime import date, datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_optional_user, require_admin, require_curator, require_submitter
from app.core.constants import CURATOR_ROLES, HAPPENING_APPROVED, HAPPENINGS_LIST_LIMIT
from app.core.errors import STATUS_BAD_REQUEST, forbidden, not_found
from app.db.session import get_db
from app.models.user_profile import UserProfile
from app.services import attendance_service, happening_service
from app.services.event_filters import EventFilters, day_end, day_start, filter_events
from app.services.happening_service import to_utc

router = APIRouter()
logger = logging.getLogger(__name__)


class HappeningCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=512)
    start_datetime: datetime
    description: str | None = None
    end_datetime: datetime | None = None
    location: str | None = Field(None, max_length=512)
    source_url: str | None = None
    scrape_log_id: str | None = None


class HappeningUpdate(BaseModel):
    title: str | None = Field(None, max_length=512)
    start_datetime: datetime | None = None
    description: str | None = None
    end_datetime: datetime | None = None
    location: str | None = Field(None, max_length=512)
    source_url: str | None = None


class ModerationBody(BaseModel):
    status: Literal["approved", "rejected", "pending"]


class AttendanceBody(BaseModel):
    status: Literal["going", "maybe_going"]


def _get_visible(db: Session, happening_id: str, user: UserProfile | None):
    row = happening_service.get_happening(db, happening_id)
    if not row or not happening_service.can_view(row, user):
        raise not_found("Happening")
    return row


# --- Browse ---


@router.get("")
def list_happenings(
    db: Session = Depends(get_db),
    user: UserProfile | None = Depends(get_optional_user),
    status: Literal["pending", "approved", "rejected"] = Query(HAPPENING_APPROVED),
    start: datetime | None = Query(None, description="Earliest start_datetime"),
    end: datetime | None = Query(None, description="Latest start_datetime"),
    submitter: str | None = Query(None, description="Only happenings submitted by this user id"),
    q: str | None = Query(None, description="Case-insensitive title search"),
    sort_by: Literal["start_datetime", "created_at", "title"] = Query("start_datetime"),
    sort_order: Literal["asc", "desc"] = Query("asc"),
    limit: int | None = Query(None, ge=1, le=500),
    date_from: date | None = Query(None, description="Whole-day lower bound on start date"),
    date_to: date | None = Query(None, description="Whole-day upper bound on start date"),
    search: str | None = Query(None, description="Search title, description and location"),
    lat: float | None = Query(None, ge=-90, le=90),
    lng: float | None = Query(None, ge=-180, le=180),
    radius_miles: float | None = Query(None, gt=0),
    default_window: bool = Query(False, description="Apply the default today..+7 days window"),
) -> dict[str, Any]:
    """
    List happenings. Non-approved statuses are for curators, except a submitter listing their own.
    date_from/date_to/search narrow the query; lat/lng/radius_miles filter in memory before `limit` applies.
    """
    if status != HAPPENING_APPROVED:
        is_curator = user is not None and user.role in CURATOR_ROLES
        own = user is not None and submitter == user.id
        if not (is_curator or own):
            raise forbidden("Curator or admin role required to list non-approved happenings")
    filters = EventFilters.default() if default_window else EventFilters()
    if date_from is not None:
        filters.date_from = date_from
    if date_to is not None:
        filters.date_to = date_to
    filters.search_query = search or ""
    filters.user_lat, filters.user_lng, filters.radius_miles = lat, lng, radius_miles

    # Radius needs geocoded rows, so the row cap applies after filtering
    lower = [to_utc(d) for d in (start, filters.date_from and day_start(filters.date_from)) if d]
    upper = [to_utc(d) for d in (end, filters.date_to and day_end(filters.date_to)) if d]
    rows = happening_service.list_happenings(
        db,
        status=status,
        start=max(lower) if lower else None,
        end=min(upper) if upper else None,
        submitter_user_id=submitter,
        query=q,
        search=filters.search_query,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=None if filters.uses_location else limit,
        capped=not filters.uses_location,
    )
    geodata = happening_service.get_geodata(rows) if filters.uses_location else {}
    rows = filter_events(rows, filters, geodata)[: limit or HAPPENINGS_LIST_LIMIT]
    return {"happenings": [happening_service.happening_to_dict(r) for r in rows], "count": len(rows)}


@router.get("/calendar")
def calendar_month(
    year: int = Query(..., ge=1970, le=9999),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """Approved happenings for a month, grouped by day."""
    return happening_service.get_calendar_month(db, year, month)


@router.get("/map")
def map_features(
    db: Session = Depends(get_db),
    start: datetime | None = Query(None),
    end: datetime | None = Query(None),
) -> dict[str, Any]:
    """Approved happenings as a GeoJSON FeatureCollection (only those whose location geocodes)."""
    rows = happening_service.list_happenings(db, status=HAPPENING_APPROVED, start=start, end=end)
    return happening_service.to_feature_collection(rows, happening_service.get_geodata(rows))


@router.get("/pending")
def pending_queue(
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_curator),
) -> dict[str, Any]:
    """Moderation queue (curator+)."""
    items = happening_service.list_pending(db)
    return {"happenings": items, "count": len(items)}


@router.get("/{happening_id}")
def get_happening(
    happening_id: str,
    db: Session = Depends(get_db),
    user: UserProfile | None = Depends(get_optional_user),
) -> dict[str, Any]:
    row = _get_visible(db, happening_id, user)
    return {
        **happening_service.happening_to_dict(row),
        "attendance": attendance_service.get_counts(db, row.id),
        "my_attendance": attendance_service.get_status(db, user.id, row.id) if user else None,
    }


# --- Submit / edit ---


@router.post("", status_code=201)
def create_happening(
    body: HappeningCreate,
    db: Session = Depends(get_db),
    user: UserProfile = Depends(require_submitter),
) -> dict[str, Any]:
    """Submit a happening. Curators and admins publish immediately; others go to the pending queue."""
    try:
        row = happening_service.create_happening(db, user, **body.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=STATUS_BAD_REQUEST, detail=str(e))
    return happening_service.happening_to_dict(row)


@router.patch("/{happening_id}")
def update_happening(
    happening_id: str,
    body: HappeningUpdate,
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_curator),
) -> dict[str, Any]:
    try:
        row = happening_service.update_happening(db, happening_id, body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=STATUS_BAD_REQUEST, detail=str(e))
    if not row:
        raise not_found("Happening")
    return happening_service.happening_to_dict(row)


@router.post("/{happening_id}/status")
def moderate_happening(
    happening_id: str,
    body: ModerationBody,
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_curator),
) -> dict[str, Any]:
    """Approve or reject a happening."""
    row = happening_service.set_status(db, happening_id, body.status)
    if not row:
        raise not_found("Happening")
    return happening_service.happening_to_dict(row)


@router.delete("/{happening_id}")
def delete_happening(
    happening_id: str,
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_admin),
) -> dict[str, Any]:
    if not happening_service.delete_happening(db, happening_id):
        raise not_found("Happening")
    return {"ok": True, "id": happening_id}


# --- Attendance ---


@router.get("/{happening_id}/attendance")
def get_attendance(
    happening_id: str,
    db: Session = Depends(get_db),
    user: UserProfile | None = Depends(get_optional_user),
) -> dict[str, Any]:
    row = _get_visible(db, happening_id, user)
    return {
        "happening_id": row.id,
        "counts": attendance_service.get_counts(db, row.id),
        "status": attendance_service.get_status(db, user.id, row.id) if user else None,
    }


@router.put("/{happening_id}/attendance")
def set_attendance(
    happening_id: str,
    body: AttendanceBody,
    db: Session = Depends(get_db),
    user: UserProfile = Depends(get_current_user),
) -> dict[str, Any]:
    row = _get_visible(db, happening_id, user)
    attendance_service.set_status(db, user.id, row.id, body.status)
    return {"happening_id": row.id, "status": body.status, "counts": attendance_service.get_counts(db, row.id)}


@router.delete("/{happening_id}/attendance")
def clear_attendance(
    happening_id: str,
    db: Session = Depends(get_db),
    user: UserProfile = Depends(get_current_user),
) -> dict[str, Any]:
    row = _get_visible(db, happening_id, user)
    removed = attendance_service.clear_status(db, user.id, row.id)
    return {"happening_id": row.id, "status": None, "removed": removed, "counts": attendance_service.get_counts(db, row.id)}
