"""
URL -> event extraction: instruction matching, page fetch/render, LLM extraction.
Orchestration and logging live in app.services.scrape_service.
"""
from app.services.scraping.matching import pattern_matches, select_instruction
from app.services.scraping.types import EVENT_FIELDS, ExtractedEvent, PageContent, ScrapeOutcome

__all__ = [
    "EVENT_FIELDS",
    "ExtractedEvent",
    "PageContent",
    "ScrapeOutcome",
    "pattern_matches",
    "select_instruction",
]
