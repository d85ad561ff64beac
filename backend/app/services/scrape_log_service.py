"""
Scrape logs for the admin Logs tab: list with matched instruction, fetch one, report a bad extraction.
"""
from typing import Any

from sqlalchemy.orm import Session

from app.core.constants import SCRAPE_LOGS_LIST_LIMIT
from app.models.custom_instruction import CustomInstruction
from app.models.scrape_log import ScrapeLog


def _to_dict(r: ScrapeLog, url_pattern: str | None = None) -> dict[str, Any]:
    return {
        "id": r.id,
        "created_at": r.created_at.isoformat() if r.created_at else None,
        "requested_by_user_id": r.requested_by_user_id,
        "url_scraped": r.url_scraped,
        "custom_instruction_id_used": r.custom_instruction_id_used,
        "custom_instruction_pattern": url_pattern,
        "playwright_flag_used": r.playwright_flag_used,
        "raw_llm_response": r.raw_llm_response,
        "parsed_event_data": r.parsed_event_data,
        "error_message": r.error_message,
        "is_reported_bad": r.is_reported_bad,
    }


def list_scrape_logs(
    db: Session,
    *,
    reported_bad: bool | None = None,
    failed_only: bool = False,
    limit: int = 100,
) -> list[dict[str, Any]]:
    """Newest first, with the matched instruction's pattern."""
    q = (
        db.query(ScrapeLog, CustomInstruction.url_pattern)
        .outerjoin(CustomInstruction, CustomInstruction.id == ScrapeLog.custom_instruction_id_used)
    )
    if reported_bad is not None:
        q = q.filter(ScrapeLog.is_reported_bad.is_(reported_bad))
    if failed_only:
        q = q.filter(ScrapeLog.error_message.isnot(None))
    rows = q.order_by(ScrapeLog.created_at.desc()).limit(min(limit, SCRAPE_LOGS_LIST_LIMIT)).all()
    return [_to_dict(log, pattern) for log, pattern in rows]


def get_scrape_log(db: Session, log_id: str) -> ScrapeLog | None:
    return db.get(ScrapeLog, log_id)


def scrape_log_to_dict(db: Session, log: ScrapeLog) -> dict[str, Any]:
    pattern = None
    if log.custom_instruction_id_used:
        instruction = db.get(CustomInstruction, log.custom_instruction_id_used)
        pattern = instruction.url_pattern if instruction else None
    return _to_dict(log, pattern)


def report_bad(db: Session, log: ScrapeLog) -> ScrapeLog:
    log.is_reported_bad = True
    db.commit()
    db.refresh(log)
    return log
