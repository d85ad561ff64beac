from types import SimpleNamespace

from app.services.scraping.matching import (
    compile_pattern,
    pattern_kind,
    pattern_matches,
    select_instruction,
    wildcard_to_regex,
)


def _instruction(id, pattern, priority=0, is_active=True, use_playwright=False):
    return SimpleNamespace(id=id, url_pattern=pattern, priority=priority, is_active=is_active, use_playwright=use_playwright)


def test_highest_priority_match_wins():
    instructions = [
        _instruction("low", r"eventbrite\.com", priority=1),
        _instruction("high", r"eventbrite\.com/e/", priority=10),
        _instruction("other", r"meetup\.com", priority=50),
    ]
    chosen = select_instruction(instructions, "https://www.eventbrite.com/e/jazz-night-123")
    assert chosen.id == "high"


def test_inactive_instructions_are_ignored():
    instructions = [
        _instruction("inactive", r"example\.org", priority=100, is_active=False),
        _instruction("active", r"example\.org", priority=1),
    ]
    assert select_instruction(instructions, "https://example.org/events/1").id == "active"


def test_no_match_returns_none():
    instructions = [_instruction("a", r"meetup\.com", priority=5)]
    assert select_instruction(instructions, "https://example.org/") is None
    assert select_instruction([], "https://example.org/") is None


def test_equal_priority_keeps_incoming_order():
    instructions = [
        _instruction("first", r"example\.org", priority=3),
        _instruction("second", r"example", priority=3),
    ]
    assert select_instruction(instructions, "https://example.org/x").id == "first"


def test_regex_is_searched_anywhere_in_url():
    assert pattern_matches(r"/events/\d+", "https://city.gov/events/42?ref=home")
    assert not pattern_matches(r"^/events/", "https://city.gov/events/42")


def test_invalid_regex_falls_back_to_wildcard():
    # A leading "*" is not a valid regex
    assert pattern_matches("*.eventbrite.com/*", "https://www.eventbrite.com/e/123")
    assert not pattern_matches("*.eventbrite.com/*", "https://www.eventbrite.co.uk/e/123")


def test_wildcard_escapes_literal_characters():
    regex = compile_pattern("*example.com?id=*")
    assert regex.pattern == wildcard_to_regex("*example.com?id=*")
    assert regex.search("https://example.com?id=7")
    assert not regex.search("https://exampleXcom?id=7")


def test_blank_pattern_never_matches_and_is_skipped():
    instructions = [
        _instruction("blank", "   ", priority=100),
        _instruction("real", r"example", priority=1),
    ]
    assert not pattern_matches("", "https://example.org")
    assert select_instruction(instructions, "https://example.org").id == "real"


def test_wildcard_fallback_is_logged_and_reported(caplog):
    # Named groups in JavaScript syntax do not compile in Python
    pattern = r"example\.org/(?<slug>\w+)"
    with caplog.at_level("WARNING", logger="app.services.scraping.matching"):
        assert pattern_kind(pattern) == "wildcard"
    assert any("not a valid regex" in r.getMessage() for r in caplog.records)
    assert pattern_kind(r"example\.org/(?P<slug>\w+)") == "regex"
    assert pattern_kind("  ") is None
