"""
URL extraction endpoint.

Request {url} with a bearer credential (submitter, curator or admin).
Success: 200 {scrape_log_id, data: {title, description, start_datetime, end_datetime, location}}.
Failure: 500 {scrape_log_id, error, details}. Every attempt is logged to scrape_logs.
"""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.deps import require_submitter
from app.core.errors import (
    MSG_INVALID_URL,
    MSG_SCRAPE_FAILED,
    MSG_SCRAPE_LOG_FAILED,
    MSG_URL_REQUIRED,
    STATUS_BAD_REQUEST,
    STATUS_INTERNAL_ERROR,
    ApiError,
)
from app.db.session import get_db
from app.models.user_profile import UserProfile
from app.services.scrape_service import ScrapeLogWriteError, run_scrape

router = APIRouter()
logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http://", "https://")


@router.post("")
async def scrape_url(
    body: Any = Body(None),
    db: Session = Depends(get_db),
    user: UserProfile = Depends(require_submitter),
) -> Any:
    raw_url = body.get("url") if isinstance(body, dict) else None
    if raw_url is not None and not isinstance(raw_url, str):
        raise ApiError(STATUS_BAD_REQUEST, MSG_INVALID_URL, "url must be a string")
    url = (raw_url or "").strip()
    if not url:
        raise ApiError(STATUS_BAD_REQUEST, MSG_URL_REQUIRED)
    if not url.lower().startswith(ALLOWED_SCHEMES):
        raise ApiError(STATUS_BAD_REQUEST, MSG_INVALID_URL, "URL must start with http:// or https://")

    try:
        outcome = await run_scrape(db, user, url)
    except ScrapeLogWriteError as e:
        raise ApiError(STATUS_INTERNAL_ERROR, MSG_SCRAPE_LOG_FAILED, str(e))

    if outcome.data is not None:
        return {"scrape_log_id": outcome.scrape_log_id, "data": outcome.data}
    return JSONResponse(
        status_code=STATUS_INTERNAL_ERROR,
        content={
            "scrape_log_id": outcome.scrape_log_id,
            "error": MSG_SCRAPE_FAILED,
            "details": outcome.error or "Unknown error",
        },
    )
