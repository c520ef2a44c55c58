"""Client utilities for the Google Geocoding API."""

import logging
from typing import Callable

import requests

from leadroute.models import GeoPoint
from leadroute.vendors.google_places import CollaboratorError

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GeocodingError(CollaboratorError):
    """Raised when an address cannot be resolved to coordinates."""


def geocode(address: str, api_key: str, timeout: int = 10) -> GeoPoint:
    if not address or not address.strip():
        raise GeocodingError("address is empty")
    if not api_key:
        raise GeocodingError("GOOGLE_MAPS_API_KEY is required")

    params = {"address": address, "key": api_key}
    try:
        response = _SESSION.get(_GEOCODE_URL, params=params, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("geocode request failed for %s: %s", address, exc)
        raise GeocodingError(str(exc)) from exc

    status = payload.get("status")
    results = payload.get("results") or []
    if status != "OK" or not results:
        logger.warning("Geocoding failed for %s: status=%s", address, status)
        raise GeocodingError(payload.get("error_message") or status or "no results")

    location = results[0].get("geometry", {}).get("location", {})
    try:
        return GeoPoint(lat=float(location["lat"]), lng=float(location["lng"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise GeocodingError(f"malformed geocoding result for {address}") from exc


def make_geocoder(api_key: str, timeout: int = 10) -> Callable[[str], GeoPoint]:
    """Bind credentials so the planner can call ``geocoder(address)``."""

    def _geocoder(address: str) -> GeoPoint:
        return geocode(address, api_key, timeout=timeout)

    return _geocoder
