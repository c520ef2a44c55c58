"""Turns batches into ordered routes and their links."""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Sequence

from leadroute.models import Batch, GeoPoint, Lead, Route, RouteLinks, SalesmanLocation, SharePayload
from leadroute.routing.batches import BatchManager
from leadroute.routing.links import to_directions_link, to_shareable_link
from leadroute.routing.optimizer import optimize
from leadroute.vendors.google_places import CollaboratorError

logger = logging.getLogger(__name__)

Geocoder = Callable[[str], GeoPoint]


def routable_stops(leads: Iterable[Lead], geocode: Optional[Geocoder] = None) -> List[Lead]:
    """Return the leads that have coordinates, geocoding the ones that don't.

    A lead that cannot be located is left out of the route; the rest are kept.
    """
    stops: List[Lead] = []
    for lead in leads:
        if not lead.location.is_unknown:
            stops.append(lead)
            continue
        if geocode is None:
            logger.warning("Excluding %s from route: no coordinates and no geocoder", lead.id)
            continue
        try:
            point = geocode(lead.address)
        except CollaboratorError as exc:
            logger.warning("Error geocoding address for %s: %s", lead.name, exc)
            continue
        stops.append(replace(lead, location=point))
    return stops


def plan_route(batch: Batch, origin: SalesmanLocation, geocode: Optional[Geocoder] = None) -> Route:
    stops = optimize(origin.point, routable_stops(batch.leads, geocode))
    return Route(batch_number=batch.number, origin=origin, stops=tuple(stops))


def build_share_payload(route: Route, timestamp: Optional[str] = None) -> SharePayload:
    return SharePayload(
        batch_number=route.batch_number,
        stops=route.stops,
        origin=route.origin,
        timestamp=timestamp or datetime.now(timezone.utc).isoformat(),
    )


def link_route(route: Route, share_base_url: str, timestamp: Optional[str] = None) -> RouteLinks:
    return RouteLinks(
        route=route,
        directions_link=to_directions_link(route.origin, route.stops),
        shareable_link=to_shareable_link(share_base_url, build_share_payload(route, timestamp)),
    )


def plan_all_routes(
    leads: Sequence[Lead],
    origin: SalesmanLocation,
    share_base_url: str,
    geocode: Optional[Geocoder] = None,
    first_batch_number: int = 1,
) -> List[RouteLinks]:
    """Plan one linked route for every consecutive batch of ``leads``."""
    timestamp = datetime.now(timezone.utc).isoformat()
    return [
        link_route(plan_route(batch, origin, geocode), share_base_url, timestamp)
        for batch in BatchManager(leads, first_batch_number=first_batch_number).batches()
    ]


def resume_route(payload: SharePayload) -> Route:
    """Rebuild the route carried by a share link without searching again."""
    stops = optimize(payload.origin.point, payload.stops)
    return Route(batch_number=payload.batch_number, origin=payload.origin, stops=tuple(stops))
