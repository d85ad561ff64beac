"""
Scrape logs API: curators review extraction attempts; requesters can flag a bad extraction.
"""
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_curator
from app.core.constants import CURATOR_ROLES
from app.core.errors import not_found
from app.db.session import get_db
from app.models.user_profile import UserProfile
from app.services import scrape_log_service

router = APIRouter()


def _get_own_or_curated(db: Session, log_id: str, user: UserProfile):
    log = scrape_log_service.get_scrape_log(db, log_id)
    # 404 rather than 403 so log ids of other users are not confirmed
    if not log or (user.role not in CURATOR_ROLES and log.requested_by_user_id != user.id):
        raise not_found("Scrape log")
    return log


@router.get("")
def list_scrape_logs(
    db: Session = Depends(get_db),
    _: UserProfile = Depends(require_curator),
    reported_bad: bool | None = Query(None),
    failed_only: bool = Query(False),
    limit: int = Query(100, ge=1, le=200),
) -> dict[str, Any]:
    logs = scrape_log_service.list_scrape_logs(db, reported_bad=reported_bad, failed_only=failed_only, limit=limit)
    return {"logs": logs, "count": len(logs)}


@router.get("/{log_id}")
def get_scrape_log(
    log_id: str,
    db: Session = Depends(get_db),
    user: UserProfile = Depends(get_current_user),
) -> dict[str, Any]:
    log = _get_own_or_curated(db, log_id, user)
    return scrape_log_service.scrape_log_to_dict(db, log)


@router.post("/{log_id}/report-bad")
def report_bad_extraction(
    log_id: str,
    db: Session = Depends(get_db),
    user: UserProfile = Depends(get_current_user),
) -> dict[str, Any]:
    """Mark the extraction as bad so curators can refine custom instructions."""
    log = _get_own_or_curated(db, log_id, user)
    scrape_log_service.report_bad(db, log)
    return {"ok": True, "id": log.id, "is_reported_bad": True}
