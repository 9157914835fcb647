"""Mapping from provider-neutral `RawPlace` records to the internal `Place` model."""

from __future__ import annotations

from safetravel.core.geo import haversine_km
from safetravel.domain.models import Coordinate, Place, PlaceCategory
from safetravel.ingestion.base import RawPlace

ADDRESS_NOT_AVAILABLE = "Address not available"


def pick_address(raw: RawPlace) -> str:
    """Vicinity first, then the formatted address, then a fixed placeholder."""
    for candidate in (raw.vicinity, raw.formatted_address):
        if candidate and candidate.strip():
            return candidate.strip()
    return ADDRESS_NOT_AVAILABLE


def to_place(raw: RawPlace, *, category: PlaceCategory, origin: Coordinate) -> Place:
    coordinate = Coordinate(latitude=raw.latitude, longitude=raw.longitude)
    return Place(
        place_id=raw.place_id,
        name=raw.name,
        address=pick_address(raw),
        category=category,
        coordinate=coordinate,
        rating=raw.rating,
        price_level=raw.price_level,
        is_open=raw.open_now,
        phone_number=raw.phone_number,
        website=raw.website,
        distance_km=haversine_km(origin, coordinate),
    )
