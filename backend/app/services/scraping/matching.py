"""
Match a URL against custom instruction patterns.

A pattern is first tried as a regular expression searched anywhere in the URL. Patterns that
are not valid regexes (e.g. "*.example.com/*") are treated as wildcards: `*` matches any run of
characters, everything else is literal, and the whole URL must match.
"""
import logging
import re
from functools import lru_cache
from typing import Iterable, Protocol, TypeVar

logger = logging.getLogger(__name__)


class _InstructionLike(Protocol):
    url_pattern: str
    priority: int
    is_active: bool


T = TypeVar("T", bound=_InstructionLike)


PATTERN_REGEX = "regex"
PATTERN_WILDCARD = "wildcard"


def wildcard_to_regex(pattern: str) -> str:
    return "^" + ".*".join(re.escape(part) for part in pattern.split("*")) + r"\Z"


@lru_cache(maxsize=512)
def _compile(pattern: str) -> tuple[re.Pattern, str] | None:
    pattern = (pattern or "").strip()
    if not pattern:
        return None
    try:
        return re.compile(pattern), PATTERN_REGEX
    except re.error as e:
        logger.warning("url_pattern %r is not a valid regex (%s); matching it as a wildcard", pattern, e)
        return re.compile(wildcard_to_regex(pattern)), PATTERN_WILDCARD


def compile_pattern(pattern: str) -> re.Pattern | None:
    """Compiled matcher for a stored pattern, or None if the pattern is blank."""
    compiled = _compile(pattern)
    return compiled[0] if compiled else None


def pattern_kind(pattern: str) -> str | None:
    """'regex', 'wildcard' (not a valid regex, matched as a wildcard) or None for a blank pattern."""
    compiled = _compile(pattern)
    return compiled[1] if compiled else None


def pattern_matches(pattern: str, url: str) -> bool:
    compiled = compile_pattern(pattern)
    if compiled is None:
        return False
    return compiled.search(url) is not None


def select_instruction(instructions: Iterable[T], url: str) -> T | None:
    """
    Highest-priority active instruction whose pattern matches url, or None.
    Ties keep the incoming order (the DB query orders ties oldest first).
    """
    candidates = sorted(
        (i for i in instructions if i.is_active),
        key=lambda i: -(i.priority or 0),
    )
    for instruction in candidates:
        if compile_pattern(instruction.url_pattern) is None:
            logger.warning("Skipping custom instruction %s: empty url_pattern", getattr(instruction, "id", None))
            continue
        if pattern_matches(instruction.url_pattern, url):
            return instruction
    return None
