import httpx
import pytest

from app.config import settings
from app.services import geocoding


@pytest.fixture(autouse=True)
def mapbox(monkeypatch):
    """Route Mapbox requests to a handler; counts calls per request path."""
    monkeypatch.setattr(settings, "mapbox_token", "test-token")
    geocoding.clear_cache()
    calls = []
    state = {"status": 200}

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        if state["status"] != 200:
            return httpx.Response(state["status"])
        if "nowhere" in request.url.path:
            return httpx.Response(200, json={"features": []})
        return httpx.Response(200, json={"features": [{"center": [-122.3422, 47.6097]}]})

    real_client = httpx.Client
    monkeypatch.setattr(
        geocoding.httpx, "Client", lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs)
    )
    yield calls, state
    geocoding.clear_cache()


def test_geocode_returns_lng_lat_and_caches_by_normalized_location(mapbox):
    calls, _ = mapbox
    assert geocoding.geocode("Pike Place Market") == (-122.3422, 47.6097)
    assert geocoding.geocode("  pike   place MARKET ") == (-122.3422, 47.6097)
    assert len(calls) == 1


def test_misses_are_cached(mapbox):
    calls, _ = mapbox
    assert geocoding.geocode("Nowhere at all") is None
    assert geocoding.geocode("nowhere at all") is None
    assert len(calls) == 1


def test_http_errors_are_not_cached(mapbox):
    calls, state = mapbox
    state["status"] = 500
    assert geocoding.geocode("Pike Place Market") is None
    state["status"] = 200
    assert geocoding.geocode("Pike Place Market") == (-122.3422, 47.6097)
    assert len(calls) == 2


def test_cache_is_bounded(mapbox):
    assert geocoding._lookup.cache_info().maxsize == geocoding.GEOCODE_CACHE_SIZE
    for i in range(geocoding.GEOCODE_CACHE_SIZE + 10):
        geocoding.geocode(f"Venue {i}")
    assert geocoding._lookup.cache_info().currsize == geocoding.GEOCODE_CACHE_SIZE


def test_not_configured_skips_lookup(mapbox, monkeypatch):
    calls, _ = mapbox
    monkeypatch.setattr(settings, "mapbox_token", "")
    assert geocoding.geocode("Pike Place Market") is None
    assert geocoding.geocode_many({"a": "Pike Place Market", "b": None}) == {}
    assert calls == []
