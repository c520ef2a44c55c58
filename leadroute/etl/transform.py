"""Utilities for transforming Google Places responses into leads."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from leadroute.models import (
    ADDRESS_UNAVAILABLE,
    NOT_AVAILABLE,
    UNKNOWN_LOCATION,
    UNKNOWN_NAME,
    GeoPoint,
    Lead,
)
from leadroute.routing.areas import CATEGORIES, CITY_AREAS, STATE

logger = logging.getLogger(__name__)


def build_search_query(category: str, area: str, city: str) -> str:
    """Compose the free-text query sent to Places, e.g. ``cafe in Adajan Surat Gujarat``."""
    if not city or not category or not area:
        raise ValueError("Please fill in all fields: city, category and area")
    if city not in CITY_AREAS:
        raise ValueError(f"unsupported city: {city}")
    if area not in CITY_AREAS[city]:
        raise ValueError(f"{area} is not an area of {city}")
    if category not in CATEGORIES:
        raise ValueError(f"unsupported category: {category}")
    return f"{category} in {area} {city} {STATE}"


def _display_name(place: Dict[str, Any]) -> Optional[str]:
    display_name = place.get("displayName")
    if isinstance(display_name, dict):
        return display_name.get("text")
    return display_name


def _parse_location(place: Dict[str, Any]) -> GeoPoint:
    location = place.get("location") or {}
    try:
        return GeoPoint(lat=float(location["latitude"]), lng=float(location["longitude"]))
    except (KeyError, TypeError, ValueError):
        return UNKNOWN_LOCATION


def _safe_float(value: Any) -> Optional[float]:
    try:
        if value is None or value == "":
            return None
        return float(value)
    except (TypeError, ValueError):
        return None


def _safe_int(value: Any) -> Optional[int]:
    try:
        if value is None or value == "":
            return None
        return max(int(value), 0)
    except (TypeError, ValueError):
        return None


def to_lead(place: Dict[str, Any], category: str) -> Lead:
    types = place.get("types") or []
    hours = (place.get("regularOpeningHours") or {}).get("weekdayDescriptions") or []

    return Lead(
        id=str(place["id"]),
        name=_display_name(place) or UNKNOWN_NAME,
        address=place.get("formattedAddress") or ADDRESS_UNAVAILABLE,
        phone=place.get("internationalPhoneNumber") or NOT_AVAILABLE,
        website=place.get("websiteUri") or NOT_AVAILABLE,
        rating=_safe_float(place.get("rating")),
        review_count=_safe_int(place.get("userRatingCount")),
        category=category,
        place_type=types[0] if types else "",
        hours=tuple(hours),
        location=_parse_location(place),
    )


def to_leads(places: Iterable[Dict[str, Any]], category: str) -> List[Lead]:
    """Convert search records, skipping ones without an id and duplicate ids."""
    leads: List[Lead] = []
    seen = set()
    for place in places:
        place_id = place.get("id")
        if not place_id:
            logger.debug("Skipping result without id: %s", place)
            continue
        if place_id in seen:
            logger.debug("Skipping duplicate place id %s", place_id)
            continue
        seen.add(place_id)
        leads.append(to_lead(place, category))
    return leads
