"""
Radius and coordinate filtering.

Radius searches scan the whole candidate collection and keep the
entries whose great-circle distance from the query point is at most
the radius.  No spatial index is involved; the input order is kept.
"""

import math
from typing import Callable, Iterable, List, Tuple, TypeVar

from ..core.errors import InvalidCoordinates

T = TypeVar("T")

EARTH_RADIUS_KM = 6371.0


def validate_coordinates(lat: float, lng: float) -> None:
    """Raise ``InvalidCoordinates`` unless lat is in [-90, 90] and lng in [-180, 180]."""
    if lat is None or lng is None or math.isnan(lat) or math.isnan(lng):
        raise InvalidCoordinates("Invalid latitude or longitude")
    if not -90 <= lat <= 90 or not -180 <= lng <= 180:
        raise InvalidCoordinates("Invalid latitude or longitude")


def validate_search(lat: float, lng: float, radius_km: float) -> None:
    """Validate a radius query before any data is loaded."""
    validate_coordinates(lat, lng)
    if radius_km is None or math.isnan(radius_km) or radius_km < 0:
        raise InvalidCoordinates("Invalid latitude, longitude or radius")


def haversine_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in kilometres between two points."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def find_within_radius(
    items: Iterable[T],
    lat: float,
    lng: float,
    radius_km: float,
    position: Callable[[T], Tuple[float, float]],
) -> List[T]:
    """Return the items located at most ``radius_km`` from (lat, lng).

    ``position`` extracts ``(latitude, longitude)`` from an item.  A
    point exactly on the circle is included.  An empty list is returned
    when nothing matches.
    """
    validate_search(lat, lng, radius_km)
    matches: List[T] = []
    for item in items:
        item_lat, item_lng = position(item)
        if haversine_km(lat, lng, item_lat, item_lng) <= radius_km:
            matches.append(item)
    return matches
