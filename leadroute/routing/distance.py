"""Great-circle distance between two coordinates."""

import math

from leadroute.models import GeoPoint

EARTH_RADIUS_KM = 6371.0


def distance(a: GeoPoint, b: GeoPoint) -> float:
    """Return the haversine distance in kilometres between ``a`` and ``b``."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat)) * math.cos(math.radians(b.lat)) * math.sin(d_lng / 2) ** 2
    )
    h = min(h, 1.0)
    return 2 * EARTH_RADIUS_KM * math.atan2(math.sqrt(h), math.sqrt(1 - h))
