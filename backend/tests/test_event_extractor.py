from datetime import date

from app.agents.event_extractor import SYSTEM_PROMPT, build_prompt
from app.services.scraping.types import ExtractedEvent, PageContent


def test_prompt_has_date_guidance_and_page():
    page = PageContent(url="https://example.org/e/1", title="Harvest Fair", text="Saturday 10am")
    prompt = build_prompt(page, "  Times on this site are Pacific.  ", today=date(2026, 10, 18))
    assert prompt.startswith("Current date: 2026-10-18\n\nSite-specific guidance:\nTimes on this site are Pacific.")
    assert "URL: https://example.org/e/1" in prompt
    assert prompt.endswith("Saturday 10am")


def test_prompt_without_guidance():
    prompt = build_prompt(PageContent(url="https://example.org"), None, today=date(2026, 1, 2))
    assert "guidance" not in prompt
    assert SYSTEM_PROMPT


def test_extracted_event_blank_fields_are_none():
    event = ExtractedEvent(title=" ", description="", location="  Town Hall ")
    assert event.title is None
    assert event.description is None
    assert event.location == "Town Hall"
    assert event.has_details()
    assert not ExtractedEvent().has_details()
