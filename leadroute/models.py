"""Core data models shared by the search and route planning code."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

UNKNOWN_NAME = "Unknown Name"
ADDRESS_UNAVAILABLE = "Address not available"
NOT_AVAILABLE = "Not available"
NOT_RATED = "Not rated"
NO_REVIEWS = "No reviews"


def _text(data: Dict[str, Any], key: str, default: str) -> str:
    """Read a display string, substituting ``default`` only when the key is absent or null."""
    value = data.get(key)
    return default if value is None else str(value)


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lng: float

    def __post_init__(self) -> None:
        if math.isnan(self.lat) or math.isnan(self.lng):
            raise ValueError("GeoPoint coordinates must not be NaN")
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"longitude out of range: {self.lng}")

    @property
    def is_unknown(self) -> bool:
        """(0, 0) marks a lead whose coordinates were never resolved."""
        return self.lat == 0 and self.lng == 0

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeoPoint":
        return cls(lat=float(data["lat"]), lng=float(data["lng"]))


UNKNOWN_LOCATION = GeoPoint(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class Lead:
    """A business returned by a place search, normalized for display and routing."""

    id: str
    name: str = UNKNOWN_NAME
    address: str = ADDRESS_UNAVAILABLE
    phone: str = NOT_AVAILABLE
    website: str = NOT_AVAILABLE
    rating: Optional[float] = None
    review_count: Optional[int] = None
    category: str = ""
    place_type: str = ""
    hours: Tuple[str, ...] = ()
    location: GeoPoint = UNKNOWN_LOCATION

    @property
    def rating_label(self) -> str:
        return NOT_RATED if self.rating is None else f"{self.rating:g}"

    @property
    def reviews_label(self) -> str:
        return NO_REVIEWS if self.review_count is None else str(self.review_count)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "website": self.website,
            "rating": self.rating,
            "reviewCount": self.review_count,
            "category": self.category,
            "placeType": self.place_type,
            "hours": list(self.hours),
            "location": self.location.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Lead":
        rating = data.get("rating")
        review_count = data.get("reviewCount")
        return cls(
            id=str(data["id"]),
            name=_text(data, "name", UNKNOWN_NAME),
            address=_text(data, "address", ADDRESS_UNAVAILABLE),
            phone=_text(data, "phone", NOT_AVAILABLE),
            website=_text(data, "website", NOT_AVAILABLE),
            rating=float(rating) if rating is not None else None,
            review_count=int(review_count) if review_count is not None else None,
            category=_text(data, "category", ""),
            place_type=_text(data, "placeType", ""),
            hours=tuple(data.get("hours") or ()),
            location=GeoPoint.from_dict(data["location"]) if data.get("location") else UNKNOWN_LOCATION,
        )


@dataclass(frozen=True, slots=True)
class SalesmanLocation:
    """Fixed starting point of a salesperson working one area."""

    key: str
    name: str
    address: str
    point: GeoPoint

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "address": self.address,
            "location": self.point.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SalesmanLocation":
        return cls(
            key=str(data["key"]),
            name=str(data["name"]),
            address=str(data["address"]),
            point=GeoPoint.from_dict(data["location"]),
        )


@dataclass(frozen=True, slots=True)
class Batch:
    number: int
    leads: Tuple[Lead, ...] = ()

    def __len__(self) -> int:
        return len(self.leads)

    @property
    def is_empty(self) -> bool:
        return not self.leads

    @property
    def ids(self) -> Tuple[str, ...]:
        return tuple(lead.id for lead in self.leads)

    def to_dict(self) -> Dict[str, Any]:
        return {"batchNumber": self.number, "leads": [lead.to_dict() for lead in self.leads]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Batch":
        return cls(
            number=int(data["batchNumber"]),
            leads=tuple(Lead.from_dict(item) for item in data["leads"]),
        )


@dataclass(frozen=True, slots=True)
class Route:
    batch_number: int
    origin: SalesmanLocation
    stops: Tuple[Lead, ...] = ()


@dataclass(frozen=True, slots=True)
class SharePayload:
    """Everything a receiving session needs to resume a batch route."""

    batch_number: int
    stops: Tuple[Lead, ...]
    origin: SalesmanLocation
    timestamp: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batchNumber": self.batch_number,
            "stops": [stop.to_dict() for stop in self.stops],
            "origin": self.origin.to_dict(),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SharePayload":
        return cls(
            batch_number=int(data["batchNumber"]),
            stops=tuple(Lead.from_dict(item) for item in data["stops"]),
            origin=SalesmanLocation.from_dict(data["origin"]),
            timestamp=str(data["timestamp"]),
        )


@dataclass(frozen=True, slots=True)
class RouteLinks:
    route: Route
    directions_link: str
    shareable_link: str = field(default="", repr=False)
