"""CLI to search leads and walk through their visiting routes batch by batch."""

import argparse
import logging
from typing import Callable, List, Optional, Sequence

from leadroute.core.config import get_settings
from leadroute.etl.transform import build_search_query, to_leads
from leadroute.models import Route, SalesmanLocation
from leadroute.routing.areas import CATEGORIES, CITY_AREAS, city_for_area, get_salesman_location
from leadroute.routing.batches import BatchManager, UnknownLeadError, load_session, save_session
from leadroute.routing.links import MalformedShareLinkError, from_shareable_link, to_directions_link
from leadroute.routing.planner import Geocoder, link_route, plan_all_routes, plan_route, resume_route
from leadroute.vendors import google_places
from leadroute.vendors.geocoding import make_geocoder
from leadroute.vendors.google_places import CollaboratorError

logger = logging.getLogger(__name__)


def _geocoder() -> Optional[Geocoder]:
    settings = get_settings()
    if not settings.google_maps_api_key:
        return None
    return make_geocoder(settings.google_maps_api_key, timeout=settings.request_timeout)


def format_route(
    route: Route,
    directions_link: str,
    shareable_link: str = "",
    is_visited: Optional[Callable[[str], bool]] = None,
) -> str:
    lines = [
        f"Route {route.batch_number}",
        f"Starting from: {route.origin.name} - {route.origin.address}",
    ]
    for index, stop in enumerate(route.stops, start=1):
        marker = " (visited)" if is_visited is not None and is_visited(stop.id) else ""
        lines.append(f"  Stop {index}: {stop.name} [{stop.id}]{marker}")
        lines.append(f"    {stop.address}")
    lines.append(f"Directions: {directions_link}")
    if shareable_link:
        lines.append(f"Share: {shareable_link}")
    return "\n".join(lines)


def _origin(manager: BatchManager, area: Optional[str]) -> SalesmanLocation:
    """An explicit area wins, then the session's own origin, then the configured default."""
    settings = get_settings()
    if area:
        return get_salesman_location(area, settings.default_area)
    if manager.origin is not None:
        return manager.origin
    return get_salesman_location(None, settings.default_area)


def _print_next_batch(manager: BatchManager, area: Optional[str]) -> None:
    batch = manager.next_batch()
    if batch.is_empty:
        print("Route complete: every lead has been visited.")
        return
    settings = get_settings()
    route = plan_route(batch, _origin(manager, area), _geocoder())
    links = link_route(route, settings.share_base_url)
    print(format_route(route, links.directions_link, links.shareable_link))


def run_search_job(*, category: str, area: str, city: Optional[str], state_file: str) -> BatchManager:
    settings = get_settings()
    api_key = settings.google_places_api_key
    if not api_key:
        raise RuntimeError("GOOGLE_PLACES_API_KEY is required")

    city = city or city_for_area(area)
    query = build_search_query(category=category, area=area, city=city or "")
    logger.info("Running Places text search for query=%s", query)

    places = google_places.search_text(query, api_key, timeout=settings.request_timeout)
    leads = to_leads(places, category)
    logger.info("Fetched %d leads for query=%s", len(leads), query)

    manager = load_session(state_file)
    manager.reset(leads, origin=get_salesman_location(area, settings.default_area))
    if not leads:
        print("No results found. Try a different search.")
    else:
        _print_next_batch(manager, area)
    save_session(state_file, manager)
    return manager


def run_routes_job(*, area: Optional[str], state_file: str) -> None:
    settings = get_settings()
    manager = load_session(state_file)
    if not manager.leads:
        print("No leads in session. Run a search first.")
        return
    origin = _origin(manager, area)
    routes = plan_all_routes(
        manager.leads,
        origin,
        settings.share_base_url,
        _geocoder(),
        first_batch_number=manager.first_batch_number,
    )
    for links in routes:
        print(format_route(links.route, links.directions_link, links.shareable_link, manager.is_visited))
        print()


def run_visit_job(*, lead_ids: Sequence[str], area: Optional[str], state_file: str) -> None:
    manager = load_session(state_file)
    completed = False
    for lead_id in lead_ids:
        try:
            completed = manager.mark_visited(lead_id) or completed
        except UnknownLeadError:
            logger.warning("Lead %s is not part of the current session", lead_id)
    print(f"Visited {len(manager.visited)}/{len(manager.leads)} leads.")
    if completed:
        print("Batch complete.")
        _print_next_batch(manager, area)
    save_session(state_file, manager)


def run_next_job(*, area: Optional[str], state_file: str) -> None:
    manager = load_session(state_file)
    if not manager.leads:
        print("No leads in session. Run a search first.")
        return
    _print_next_batch(manager, area)
    save_session(state_file, manager)


def run_open_link_job(*, url: str, state_file: str) -> bool:
    """Show a shared route. A malformed link starts a fresh session instead."""
    try:
        payload = from_shareable_link(url)
    except MalformedShareLinkError as exc:
        logger.error("Cannot open shared route: %s", exc)
        save_session(state_file, BatchManager())
        print("Shared link is invalid; started a fresh session.")
        return False

    route = resume_route(payload)
    manager = BatchManager(route.stops, origin=route.origin, first_batch_number=route.batch_number)
    manager.next_batch()
    save_session(state_file, manager)
    print(format_route(route, to_directions_link(route.origin, route.stops)))
    print(f"Shared at {payload.timestamp}")
    return True


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Find leads and plan visiting routes")
    parser.add_argument(
        "--state-file",
        dest="state_file",
        default=settings.session_file,
        help="JSON file holding the current route session",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Search leads and start a new route session")
    search.add_argument("--category", required=True, choices=CATEGORIES, help="Business category")
    search.add_argument("--area", required=True, help="Area to search in, e.g. Adajan")
    search.add_argument("--city", choices=sorted(CITY_AREAS), help="City; inferred from the area when omitted")

    routes = subparsers.add_parser("routes", help="Plan routes for every batch of the session")
    routes.add_argument("--area", default=None, help="Area of the salesman house; defaults to the session's")

    visit = subparsers.add_parser("visit", help="Mark leads as visited")
    visit.add_argument("lead_ids", nargs="+", help="Place ids of visited leads")
    visit.add_argument("--area", default=None, help="Area of the salesman house; defaults to the session's")

    next_batch = subparsers.add_parser("next", help="Show the route for the current batch")
    next_batch.add_argument("--area", default=None, help="Area of the salesman house; defaults to the session's")

    open_link = subparsers.add_parser("open-link", help="Open a shared route link")
    open_link.add_argument("url", help="Shareable link produced by this tool")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "search":
            run_search_job(category=args.category, area=args.area, city=args.city, state_file=args.state_file)
        elif args.command == "routes":
            run_routes_job(area=args.area, state_file=args.state_file)
        elif args.command == "visit":
            run_visit_job(lead_ids=args.lead_ids, area=args.area, state_file=args.state_file)
        elif args.command == "next":
            run_next_job(area=args.area, state_file=args.state_file)
        elif args.command == "open-link":
            return 0 if run_open_link_job(url=args.url, state_file=args.state_file) else 1
    except CollaboratorError as exc:
        logger.error("Search failed: %s", exc)
        return 1
    except RuntimeError as exc:
        logger.error("Configuration error: %s", exc)
        return 2
    except ValueError as exc:
        logger.error("Invalid input: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
