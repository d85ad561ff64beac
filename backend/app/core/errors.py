"""
Centralized error handling for API and extraction failures.
Constants and reusable helpers so routes stay thin and new error types are easy to add.
"""
from __future__ import annotations

from typing import Any, Callable

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

# AI / Gemini
GEMINI_BILLING_URL = "https://aistudio.google.com/apikey"
MSG_AI_QUOTA_EXCEEDED = (
    "AI service quota exceeded. Check your Gemini plan and billing at {url}"
).format(url=GEMINI_BILLING_URL)
MSG_AI_NOT_CONFIGURED = "AI service not configured. Add GEMINI_API_KEY to .env."
MSG_PAGE_TIMEOUT = "Timed out loading the page"

# Wire messages for auth and extraction (kept stable for existing clients)
MSG_MISSING_AUTH = "Missing Authorization header"
MSG_AUTH_FAILED = "Authentication failed"
MSG_INSUFFICIENT_PERMISSIONS = "Insufficient permissions"
MSG_URL_REQUIRED = "URL is required"
MSG_INVALID_URL = "Invalid URL"
MSG_SCRAPE_FAILED = "Failed to scrape event details"
MSG_SCRAPE_LOG_FAILED = "Failed to log scrape attempt"
MSG_NO_EVENT_FOUND = "No event details found"

# HTTP status codes for known error categories
STATUS_BAD_REQUEST = 400
STATUS_UNAUTHORIZED = 401
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_CONFLICT = 409
STATUS_INTERNAL_ERROR = 500
STATUS_SERVICE_UNAVAILABLE = 503  # quota, rate limit, provider down


class ApiError(Exception):
    """Error rendered as {error, details} (the shape the extraction endpoint has always returned)."""

    def __init__(self, status_code: int, error: str, details: str | None = None, **extra: Any):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details
        self.extra = extra

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = dict(self.extra)
        body["error"] = self.error
        if self.details is not None:
            body["details"] = self.details
        return body


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def not_found(entity: str) -> HTTPException:
    return HTTPException(status_code=STATUS_NOT_FOUND, detail=f"{entity} not found")


def forbidden(detail: str = MSG_INSUFFICIENT_PERMISSIONS) -> HTTPException:
    return HTTPException(status_code=STATUS_FORBIDDEN, detail=detail)


# ---------------------------------------------------------------------------
# Extraction error rules: (predicate, detail_message)
# Add new rules here instead of scattering checks in services.
# ---------------------------------------------------------------------------

def _is_quota_error(msg: str) -> bool:
    lower = msg.lower()
    return (
        "429" in msg
        or "resource_exhausted" in lower
        or "quota" in lower
        or "rate limit" in lower
    )


def _is_missing_key_error(msg: str) -> bool:
    lower = msg.lower()
    return "api key" in lower and ("set" in lower or "missing" in lower or "invalid" in lower)


def _is_timeout_error(msg: str) -> bool:
    lower = msg.lower()
    return "timeout" in lower or "timed out" in lower


# List of (predicate, detail). First match wins.
EXTRACTION_ERROR_RULES: list[tuple[Callable[[str], bool], str]] = [
    (_is_quota_error, MSG_AI_QUOTA_EXCEEDED),
    (_is_missing_key_error, MSG_AI_NOT_CONFIGURED),
    (_is_timeout_error, MSG_PAGE_TIMEOUT),
]


def describe_extraction_error(exc: Exception) -> str:
    """
    Turn an exception raised while fetching or extracting into the message stored on the scrape log.
    Uses EXTRACTION_ERROR_RULES for known error types; otherwise the exception text (or its type).
    """
    msg = str(exc) or type(exc).__name__
    for predicate, detail in EXTRACTION_ERROR_RULES:
        if predicate(msg):
            return f"{detail} ({msg[:200]})"
    return msg
