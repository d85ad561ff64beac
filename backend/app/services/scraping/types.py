"""Types shared by the scraping pipeline."""
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, field_validator

EVENT_FIELDS = ("title", "description", "start_datetime", "end_datetime", "location")


class ExtractedEvent(BaseModel):
    """Structured output of the extraction model. Datetimes are ISO 8601 strings."""

    title: str | None = Field(None, description="Event title")
    description: str | None = Field(None, description="Short plain-text description of the event")
    start_datetime: str | None = Field(None, description="Start, ISO 8601 (YYYY-MM-DDTHH:MM:SS with offset if known)")
    end_datetime: str | None = Field(None, description="End, ISO 8601, or null if not stated")
    location: str | None = Field(None, description="Venue name and street address as one string")

    @field_validator(*EVENT_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    def has_details(self) -> bool:
        return any(getattr(self, f) for f in EVENT_FIELDS)


@dataclass
class PageContent:
    """Page reduced to what the model needs: title, meta tags, JSON-LD blocks and visible text."""

    url: str
    title: str | None = None
    meta: dict[str, str] = field(default_factory=dict)
    json_ld: list[str] = field(default_factory=list)
    text: str = ""
    rendered: bool = False

    def to_prompt(self) -> str:
        parts = [f"URL: {self.url}"]
        if self.title:
            parts.append(f"Page title: {self.title}")
        for name, value in self.meta.items():
            parts.append(f"Meta {name}: {value}")
        for block in self.json_ld:
            parts.append(f"JSON-LD:\n{block}")
        parts.append(f"Page text:\n{self.text}")
        return "\n\n".join(parts)


@dataclass
class ScrapeOutcome:
    """Result of one extraction attempt; exactly one of data / error is set."""

    scrape_log_id: str
    data: dict[str, Any] | None = None
    error: str | None = None
    custom_instruction_id: str | None = None
    used_playwright: bool = False
