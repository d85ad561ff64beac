"""
In-memory filter composition over a list of happenings: date range, text search, radius.

Date bounds are whole days: `date_from` starts at 00:00:00.000, `date_to` ends at 23:59:59.999.
Radius filtering needs coordinates; happenings without them are kept rather than hidden.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Mapping

from app.core.constants import DEFAULT_FILTER_WINDOW_DAYS, EARTH_RADIUS_MILES
from app.models.happening import Happening

# (lng, lat), the order geocoders return
Coordinates = tuple[float, float]


def calculate_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Haversine distance in miles."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


@dataclass
class EventFilters:
    date_from: date | None = None
    date_to: date | None = None
    search_query: str = ""
    user_lat: float | None = None
    user_lng: float | None = None
    radius_miles: float | None = None

    @classmethod
    def default(cls, today: date | None = None) -> "EventFilters":
        today = today or date.today()
        return cls(date_from=today, date_to=today + timedelta(days=DEFAULT_FILTER_WINDOW_DAYS))

    @property
    def uses_location(self) -> bool:
        return self.user_lat is not None and self.user_lng is not None and bool(self.radius_miles)


def day_start(d: date) -> datetime:
    return datetime.combine(d, time.min)


def day_end(d: date) -> datetime:
    return datetime.combine(d, time(23, 59, 59, 999000))


def _naive(dt: datetime) -> datetime:
    # Compare wall-clock values; SQLite returns naive datetimes, Postgres aware ones
    if dt.tzinfo is not None:
        return dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _in_date_range(event: Happening, filters: EventFilters) -> bool:
    start = _naive(event.start_datetime)
    if filters.date_from and start < day_start(filters.date_from):
        return False
    if filters.date_to and start > day_end(filters.date_to):
        return False
    return True


def _matches_search(event: Happening, query: str) -> bool:
    q = query.strip().lower()
    if not q:
        return True
    return any(q in (value or "").lower() for value in (event.title, event.description, event.location))


def _within_radius(event: Happening, filters: EventFilters, geodata: Mapping[str, Coordinates]) -> bool:
    if not event.location:
        return True
    coords = geodata.get(event.id)
    if coords is None:
        return True
    lng, lat = coords
    return calculate_distance(filters.user_lat, filters.user_lng, lat, lng) <= filters.radius_miles


def filter_events(
    events: Iterable[Happening],
    filters: EventFilters,
    geodata: Mapping[str, Coordinates] | None = None,
) -> list[Happening]:
    geodata = geodata or {}
    out = []
    for event in events:
        if not _in_date_range(event, filters):
            continue
        if filters.uses_location and not _within_radius(event, filters, geodata):
            continue
        if filters.search_query and not _matches_search(event, filters.search_query):
            continue
        out.append(event)
    return out
