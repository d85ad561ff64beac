"""Event extraction agent: page content -> ExtractedEvent. Instructions loaded from event_extractor_instructions.md."""
import logging
from datetime import date
from pathlib import Path

from pydantic_ai import Agent
from pydantic_ai.settings import ModelSettings

from app.config import settings
from app.services.scraping.types import ExtractedEvent, PageContent

logger = logging.getLogger(__name__)

_INSTRUCTIONS_PATH = Path(__file__).resolve().parent / "event_extractor_instructions.md"
SYSTEM_PROMPT = _INSTRUCTIONS_PATH.read_text().strip()

# defer_model_check: the provider key is only needed when a request actually runs
agent = Agent(
    model=settings.ai_model,
    output_type=ExtractedEvent,
    instructions=SYSTEM_PROMPT,
    retries=1,
    defer_model_check=True,
    model_settings=ModelSettings(temperature=0.1, max_tokens=2048),
)


def build_prompt(page: PageContent, guidance: str | None = None, *, today: date | None = None) -> str:
    parts = [f"Current date: {(today or date.today()).isoformat()}"]
    if guidance and guidance.strip():
        parts.append(f"Site-specific guidance:\n{guidance.strip()}")
    parts.append(page.to_prompt())
    return "\n\n".join(parts)


async def extract_event(page: PageContent, guidance: str | None = None) -> ExtractedEvent:
    result = await agent.run(build_prompt(page, guidance))
    logger.debug("Extraction usage for %s: %s", page.url, result.usage())
    return result.output
