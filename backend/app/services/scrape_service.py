"""
URL extraction flow: match instruction -> fetch/render -> LLM extraction -> one scrape log row.

Single attempt per request. Failures are caught and stored as the log's error_message;
no retries, no de-duplication of concurrent requests for the same URL.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.agents.event_extractor import extract_event
from app.core.errors import MSG_NO_EVENT_FOUND, describe_extraction_error
from app.models.scrape_log import ScrapeLog
from app.models.user_profile import UserProfile
from app.services.instruction_service import get_active_instructions
from app.services.scraping.fetcher import fetch_page_content
from app.services.scraping.matching import select_instruction
from app.services.scraping.types import ScrapeOutcome

logger = logging.getLogger(__name__)


class ScrapeLogWriteError(Exception):
    """The attempt ran but its log row could not be stored."""


async def run_scrape(db: Session, user: UserProfile, url: str) -> ScrapeOutcome:
    matched = select_instruction(get_active_instructions(db), url)
    use_playwright = bool(matched and matched.use_playwright)
    guidance = matched.instructions_text if matched else None
    instruction_id = matched.id if matched else None
    logger.info("Scraping URL: %s with playwright: %s, custom instruction: %s", url, use_playwright, instruction_id)

    raw_response = None
    parsed = None
    error_message = None
    try:
        page = await fetch_page_content(url, use_playwright=use_playwright)
        event = await extract_event(page, guidance)
        raw_response = event.model_dump(mode="json")
        if event.has_details():
            parsed = raw_response
        else:
            error_message = MSG_NO_EVENT_FOUND
    except Exception as e:
        logger.warning("Scrape failed for %s: %s", url, e, exc_info=True)
        error_message = describe_extraction_error(e)

    log = ScrapeLog(
        requested_by_user_id=user.id,
        url_scraped=url,
        custom_instruction_id_used=instruction_id,
        playwright_flag_used=use_playwright,
        raw_llm_response=raw_response,
        parsed_event_data=parsed,
        error_message=error_message,
        is_reported_bad=False,
    )
    try:
        db.add(log)
        db.commit()
        db.refresh(log)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to log scrape attempt for %s", url)
        raise ScrapeLogWriteError(str(e)) from e

    return ScrapeOutcome(
        scrape_log_id=log.id,
        data=parsed,
        error=error_message,
        custom_instruction_id=instruction_id,
        used_playwright=use_playwright,
    )
