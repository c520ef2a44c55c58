"""Client utilities for the Google Places API (v1 Text Search)."""

import logging
from typing import Any, Dict, List

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_SEARCH_URL = "https://places.googleapis.com/v1/places:searchText"
_FIELD_MASK = ",".join(
    [
        "places.id",
        "places.displayName",
        "places.formattedAddress",
        "places.rating",
        "places.userRatingCount",
        "places.websiteUri",
        "places.regularOpeningHours",
        "places.types",
        "places.internationalPhoneNumber",
        "places.location",
    ]
)


class CollaboratorError(RuntimeError):
    """Raised when an external search or geocoding service fails."""


class GooglePlacesError(CollaboratorError):
    """Raised when the Places API returns a non-successful response."""


def search_text(
    query: str,
    api_key: str,
    language_code: str = "en",
    region_code: str = "IN",
    timeout: int = 10,
) -> List[Dict[str, Any]]:
    """Run a text search and return the raw ``places`` records (possibly empty)."""
    if not query or not query.strip():
        raise ValueError("Query parameter is required")
    if not api_key:
        raise GooglePlacesError("GOOGLE_PLACES_API_KEY is required")

    body = {"textQuery": query.strip(), "languageCode": language_code, "regionCode": region_code}
    headers = {
        "Content-Type": "application/json",
        "X-Goog-Api-Key": api_key,
        "X-Goog-FieldMask": _FIELD_MASK,
    }
    logger.info("Making request to Google Places API for query=%s", query)
    try:
        response = _SESSION.post(_SEARCH_URL, json=body, headers=headers, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("search_text failed for query=%s: %s", query, exc)
        raise GooglePlacesError(f"Failed to fetch data: {exc}") from exc

    error = payload.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else str(error)
        logger.error("search_text failed: error=%s", message)
        raise GooglePlacesError(message or "Places API error")

    places = payload.get("places") or []
    logger.debug("search_text returned %d places", len(places))
    return places
