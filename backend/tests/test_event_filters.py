from datetime import date, datetime

import pytest

from app.models.happening import Happening
from app.services.event_filters import EventFilters, calculate_distance, filter_events


def _event(id, start, title="Event", description=None, location=None):
    return Happening(id=id, title=title, description=description, location=location, start_datetime=start)


def test_calculate_distance_known_pair():
    # Seattle -> Portland is roughly 145 miles
    d = calculate_distance(47.6062, -122.3321, 45.5152, -122.6784)
    assert d == pytest.approx(145, abs=3)
    assert calculate_distance(47.6, -122.3, 47.6, -122.3) == 0


def test_date_range_uses_whole_days():
    events = [
        _event("before", datetime(2026, 5, 9, 23, 59)),
        _event("start_of_day", datetime(2026, 5, 10, 0, 0)),
        _event("end_of_day", datetime(2026, 5, 12, 23, 59, 59)),
        _event("after", datetime(2026, 5, 13, 0, 0)),
    ]
    filters = EventFilters(date_from=date(2026, 5, 10), date_to=date(2026, 5, 12))
    assert [e.id for e in filter_events(events, filters)] == ["start_of_day", "end_of_day"]


def test_open_ended_date_bounds():
    events = [_event("a", datetime(2026, 1, 1, 12)), _event("b", datetime(2026, 6, 1, 12))]
    assert [e.id for e in filter_events(events, EventFilters(date_from=date(2026, 3, 1)))] == ["b"]
    assert [e.id for e in filter_events(events, EventFilters(date_to=date(2026, 3, 1)))] == ["a"]


def test_search_matches_title_description_or_location():
    events = [
        _event("title", datetime(2026, 5, 10), title="Jazz in the Park"),
        _event("desc", datetime(2026, 5, 10), title="Evening", description="Live JAZZ trio"),
        _event("loc", datetime(2026, 5, 10), title="Show", location="Jazz Alley"),
        _event("none", datetime(2026, 5, 10), title="Book club"),
    ]
    result = filter_events(events, EventFilters(search_query="jazz"))
    assert [e.id for e in result] == ["title", "desc", "loc"]


def test_radius_filter_keeps_events_without_coordinates():
    events = [
        _event("near", datetime(2026, 5, 10), location="Pike Place Market"),
        _event("far", datetime(2026, 5, 10), location="Pioneer Square, Portland"),
        _event("ungeocoded", datetime(2026, 5, 10), location="Somewhere vague"),
        _event("no_location", datetime(2026, 5, 10)),
    ]
    geodata = {"near": (-122.3422, 47.6097), "far": (-122.6794, 45.5189)}
    filters = EventFilters(user_lat=47.6062, user_lng=-122.3321, radius_miles=10)
    assert [e.id for e in filter_events(events, filters, geodata)] == ["near", "ungeocoded", "no_location"]


def test_default_window_is_one_week():
    filters = EventFilters.default(today=date(2026, 10, 18))
    assert filters.date_from == date(2026, 10, 18)
    assert filters.date_to == date(2026, 10, 25)
    assert not filters.uses_location
