"""Navigation and share links for a batch route."""

import json
import logging
from typing import Sequence
from urllib.parse import parse_qs, quote, urlsplit, urlunsplit

from leadroute.models import UNKNOWN_NAME, Lead, SalesmanLocation, SharePayload

logger = logging.getLogger(__name__)

DIRECTIONS_BASE_URL = "https://www.google.com/maps/dir/"
SHARE_PARAM = "batch"
# Characters JavaScript's encodeURIComponent leaves untouched.
_URI_COMPONENT_SAFE = "-_.!~*'()"


class MalformedShareLinkError(ValueError):
    """Raised when a shared route link cannot be decoded into a payload."""


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def _stop_label(stop: Lead) -> str:
    if stop.name == UNKNOWN_NAME:
        return stop.address
    return f"{stop.name}, {stop.address}"


def to_directions_link(origin: SalesmanLocation, stops: Sequence[Lead]) -> str:
    """Google Maps directions URL starting at ``origin`` and visiting ``stops`` in order."""
    segments = [encode_component(origin.address)]
    segments.extend(encode_component(_stop_label(stop)) for stop in stops)
    return DIRECTIONS_BASE_URL + "/".join(segments)


def to_shareable_link(base_url: str, payload: SharePayload) -> str:
    """Append the payload as the ``batch`` query parameter, replacing any existing one."""
    encoded = encode_component(json.dumps(payload.to_dict(), ensure_ascii=False, separators=(",", ":")))
    parts = urlsplit(base_url)
    query = [pair for pair in parts.query.split("&") if pair and pair.split("=", 1)[0] != SHARE_PARAM]
    query.append(f"{SHARE_PARAM}={encoded}")
    return urlunsplit(parts._replace(query="&".join(query)))


def from_shareable_link(url: str) -> SharePayload:
    """Decode the payload embedded by :func:`to_shareable_link`."""
    values = parse_qs(urlsplit(url).query).get(SHARE_PARAM)
    if not values:
        raise MalformedShareLinkError(f"link has no '{SHARE_PARAM}' parameter")

    try:
        data = json.loads(values[-1])
    except ValueError as exc:
        raise MalformedShareLinkError("shared route is not valid JSON") from exc
    if not isinstance(data, dict):
        raise MalformedShareLinkError("shared route must be a JSON object")

    try:
        payload = SharePayload.from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError, OverflowError) as exc:
        logger.warning("Shared route payload is incomplete: %s", exc)
        raise MalformedShareLinkError(f"shared route is missing or has invalid fields: {exc}") from exc
    if payload.batch_number < 1:
        raise MalformedShareLinkError(f"invalid batch number: {payload.batch_number}")
    return payload
