"""
Forward geocoding of happening locations via the Mapbox Geocoding API.
Results (including misses) are kept in a bounded LRU cache keyed by normalized location string.
Request failures are not cached.
"""
import logging
from functools import lru_cache
from urllib.parse import quote

import httpx

from app.config import settings

logger = logging.getLogger(__name__)

MAPBOX_GEOCODE_URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{query}.json"
GEOCODE_TIMEOUT_SECONDS = 10.0
GEOCODE_CACHE_SIZE = 2048


def _normalize(location: str) -> str:
    return " ".join(location.split()).lower()


def is_configured() -> bool:
    return bool(settings.mapbox_token)


@lru_cache(maxsize=GEOCODE_CACHE_SIZE)
def _lookup(key: str) -> tuple[float, float] | None:
    """Mapbox lookup for a normalized location. Raises httpx.HTTPError on transport or HTTP errors."""
    url = MAPBOX_GEOCODE_URL.format(query=quote(key, safe=""))
    with httpx.Client(timeout=GEOCODE_TIMEOUT_SECONDS) as c:
        r = c.get(url, params={"access_token": settings.mapbox_token, "limit": 1})
    r.raise_for_status()
    features = (r.json() or {}).get("features") or []
    if not features:
        return None
    center = features[0].get("center") or []
    if len(center) != 2:
        return None
    return float(center[0]), float(center[1])


def geocode(location: str | None) -> tuple[float, float] | None:
    """Return (lng, lat) for a free-text location, or None if unknown or geocoding is not configured."""
    if not location or not location.strip() or not is_configured():
        return None
    try:
        return _lookup(_normalize(location))
    except httpx.HTTPError as e:
        logger.warning("Geocoding failed for %r: %s", location, e)
        return None


def geocode_many(locations: dict[str, str | None]) -> dict[str, tuple[float, float]]:
    """Map of id -> (lng, lat) for every id whose location geocodes."""
    out: dict[str, tuple[float, float]] = {}
    for key, location in locations.items():
        coords = geocode(location)
        if coords is not None:
            out[key] = coords
    return out


def clear_cache() -> None:
    _lookup.cache_clear()
