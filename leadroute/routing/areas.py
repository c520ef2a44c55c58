"""Supported search areas and the fixed salesman starting points."""

import logging
from typing import Dict, Optional, Tuple

from leadroute.models import GeoPoint, SalesmanLocation

logger = logging.getLogger(__name__)

STATE = "Gujarat"
CATEGORIES: Tuple[str, ...] = ("cafe", "school", "restaurant")

CITY_AREAS: Dict[str, Tuple[str, ...]] = {
    "Surat": (
        "Adajan",
        "Athwa",
        "Vesu",
        "Katargam",
        "Piplod",
        "Pal",
        "Althan",
        "Varachha",
        "Sarthana",
        "Mota Varachha",
    ),
    "Vadodara": (
        "Alkapuri",
        "Gotri",
        "Fatehgunj",
        "Akota",
        "Manjalpur",
        "Tandalja",
        "Waghodia Road",
        "Subhanpura",
        "Karelibaug",
        "Harni",
    ),
    "Ahmedabad": (
        "Satellite",
        "Vastrapur",
        "Navrangpura",
        "Paldi",
        "Bopal",
        "Ghatlodia",
        "Thaltej",
        "Bodakdev",
        "Sola",
        "S.G. Highway",
    ),
}

# Only these areas have a salesman house; every other key resolves to DEFAULT_AREA.
SALESMAN_LOCATIONS: Dict[str, SalesmanLocation] = {
    "Mota Varachha": SalesmanLocation(
        key="Mota Varachha",
        name="Mota Varachha Salesman House",
        address="Mota Varachha, Surat, Gujarat",
        point=GeoPoint(21.2487, 72.8417),
    ),
    "Adajan": SalesmanLocation(
        key="Adajan",
        name="Adajan Salesman House",
        address="Adajan, Surat, Gujarat",
        point=GeoPoint(21.1702, 72.8311),
    ),
}
DEFAULT_AREA = "Adajan"


def city_for_area(area: str) -> Optional[str]:
    for city, areas in CITY_AREAS.items():
        if area in areas:
            return city
    return None


def get_salesman_location(area: Optional[str], default_area: str = DEFAULT_AREA) -> SalesmanLocation:
    """Return the salesman location for ``area``, falling back to ``default_area``.

    Lookup is exact after trimming whitespace. When ``default_area`` itself is
    not in the table the built-in ``DEFAULT_AREA`` is used.
    """
    key = (area or "").strip()
    location = SALESMAN_LOCATIONS.get(key)
    if location is not None:
        return location

    logger.debug("No salesman location for area=%r; using default %s", area, default_area)
    fallback = SALESMAN_LOCATIONS.get(default_area)
    if fallback is None:
        logger.warning("Configured default area %r has no salesman location; using %s", default_area, DEFAULT_AREA)
        fallback = SALESMAN_LOCATIONS[DEFAULT_AREA]
    return fallback
