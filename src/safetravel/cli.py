"""
SafeTravel CLI entrypoint.

Quick local lookups without the web API:
- `search`: nearby places around a coordinate (or an address, geocoded first)
- `geocode`: resolve an address
- `alerts`: disaster alerts, nearest first when a location is given
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from safetravel.api.deps import Services, build_services
from safetravel.config.settings import get_settings
from safetravel.core.errors import SafeTravelError, ValidationError
from safetravel.core.logging import configure_logging
from safetravel.domain.models import PLACE_CATEGORIES, Coordinate


def _print_json(items: Any) -> None:
    print(json.dumps(items, ensure_ascii=False, indent=2))


def _cmd_search(args: argparse.Namespace, services: Services) -> int:
    """Handle the `search` subcommand."""
    address = args.address
    if args.lat is not None and args.lon is not None:
        origin = Coordinate(latitude=args.lat, longitude=args.lon)
    elif address:
        geocoded = services.geocoding.geocode(address)
        origin = geocoded.coordinate
        print(f"Resolved: {geocoded.formatted_address} ({origin.latitude:.5f}, {origin.longitude:.5f})")
    else:
        raise ValidationError("Provide --lat/--lon or --address")

    places = services.places.search(origin, args.radius, args.category, address=address)

    if args.json:
        _print_json([p.model_dump(mode="json") for p in places])
        return 0

    if not places:
        print("No places found.")
    for i, place in enumerate(places, start=1):
        rating = f"{place.rating:.1f}" if place.rating is not None else "n/a"
        status = {True: "open", False: "closed", None: "hours unknown"}[place.is_open]
        print(f"{i:>2}. {place.name}  {place.distance_km:.2f} km  rating={rating}  {status}")
        print(f"    {place.address}")
    return 0


def _cmd_geocode(args: argparse.Namespace, services: Services) -> int:
    result = services.geocoding.geocode(args.address)
    if args.json:
        _print_json(result.model_dump(mode="json"))
        return 0
    print(f"{result.formatted_address}: {result.coordinate.latitude:.6f}, {result.coordinate.longitude:.6f}")
    return 0


def _cmd_alerts(args: argparse.Namespace, services: Services) -> int:
    location = None
    if args.lat is not None and args.lon is not None:
        location = Coordinate(latitude=args.lat, longitude=args.lon)
    ranked = services.alerts.ranked(location, args.min_count)

    if args.json:
        _print_json([r.model_dump(mode="json") for r in ranked])
        return 0

    for item in ranked:
        alert = item.alert
        distance = f"{item.distance_km:.1f} km" if item.distance_km is not None else "distance unknown"
        print(f"[{alert.severity.upper():>8}] {alert.title} ({alert.location}) - {distance}")
        print(f"           {alert.published_at.isoformat()}  {alert.url or ''}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the SafeTravel CLI."""
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="safetravel")
    sub = parser.add_subparsers(dest="command", required=True)

    s = sub.add_parser("search", help="Find nearby hospitals, pharmacies, lodging or restaurants.")
    s.add_argument("--lat", type=float, default=None)
    s.add_argument("--lon", type=float, default=None)
    s.add_argument("--address", type=str, default=None, help="Geocoded when --lat/--lon are omitted.")
    s.add_argument("--radius", type=int, default=settings.search.default_radius_m, help="Meters.")
    s.add_argument("--category", choices=PLACE_CATEGORIES, default=settings.search.default_category)
    s.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    s.set_defaults(func=_cmd_search)

    g = sub.add_parser("geocode", help="Resolve an address to coordinates.")
    g.add_argument("address")
    g.add_argument("--json", action="store_true")
    g.set_defaults(func=_cmd_geocode)

    a = sub.add_parser("alerts", help="List disaster alerts, nearest first when a location is given.")
    a.add_argument("--lat", type=float, default=None)
    a.add_argument("--lon", type=float, default=None)
    a.add_argument("--min-count", type=int, default=settings.alerts.min_count)
    a.add_argument("--json", action="store_true")
    a.set_defaults(func=_cmd_alerts)
    return parser


def main(argv: list[str] | None = None, services: Services | None = None) -> int:
    """CLI entrypoint callable used by `python -m safetravel.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    services = services or build_services(get_settings())
    try:
        return int(args.func(args, services))
    except SafeTravelError as e:
        print(f"error: {e.code}: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
