"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    google_places_api_key: str
    google_maps_api_key: str
    share_base_url: str = "http://localhost:3000"
    default_area: str = "Adajan"
    request_timeout: int = 10
    session_file: str = ".leadroute-session.json"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_places_api_key = os.getenv("GOOGLE_PLACES_API_KEY", "")
    google_maps_api_key = os.getenv("GOOGLE_MAPS_API_KEY", "") or google_places_api_key
    share_base_url = os.getenv("SHARE_BASE_URL", "http://localhost:3000").rstrip("/")
    default_area = os.getenv("DEFAULT_AREA", "Adajan").strip() or "Adajan"
    request_timeout = int(os.getenv("REQUEST_TIMEOUT", "10"))
    session_file = os.getenv("SESSION_FILE", ".leadroute-session.json")

    if not google_places_api_key:
        logger.warning("GOOGLE_PLACES_API_KEY is not configured; Google Places requests will fail.")
    if not google_maps_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY is not configured; leads without coordinates cannot be geocoded.")

    return Settings(
        google_places_api_key=google_places_api_key,
        google_maps_api_key=google_maps_api_key,
        share_base_url=share_base_url,
        default_area=default_area,
        request_timeout=request_timeout,
        session_file=session_file,
    )
