"""
Place search pipeline.

`PlaceSearchService.search()` is the core request path:

1. validate the origin and radius (before any network call),
2. resolve the category (unknown values fall back to the configured default),
3. call the places provider,
4. interpret the provider status (`OK` / `ZERO_RESULTS` / anything else is an error),
5. normalize raw records and annotate each with its distance from the origin (km),
6. sort nearest first (stable, so provider order breaks ties),
7. record the search and cache new places in the store.

Nothing is written to the store when the provider call fails.
"""

from __future__ import annotations

import logging

from safetravel.core.errors import ProviderError, ValidationError
from safetravel.domain.models import (
    DEFAULT_PLACE_CATEGORY,
    Coordinate,
    Place,
    PlaceCategory,
    resolve_place_category,
)
from safetravel.ingestion.base import STATUS_OK, STATUS_ZERO_RESULTS, PlacesProvider
from safetravel.search.normalize import to_place
from safetravel.storage.memory import InMemoryStore

logger = logging.getLogger(__name__)

# Internal category -> provider place type.
PLACE_TYPES: dict[str, str] = {
    "hospital": "hospital",
    "pharmacy": "pharmacy",
    "lodging": "lodging",
    "restaurant": "restaurant",
}


class PlaceSearchService:
    def __init__(
        self,
        provider: PlacesProvider,
        store: InMemoryStore,
        *,
        default_category: PlaceCategory = DEFAULT_PLACE_CATEGORY,
        cache_places: bool = True,
    ):
        self._provider = provider
        self._store = store
        self._default_category = default_category
        self._cache_places = cache_places

    def search(
        self,
        origin: Coordinate | None,
        radius_m: int = 5000,
        category: str | None = DEFAULT_PLACE_CATEGORY,
        *,
        address: str | None = None,
    ) -> list[Place]:
        """Search places around `origin`; returns them nearest first."""
        if origin is None:
            raise ValidationError("Latitude and longitude are required")
        if radius_m is None or int(radius_m) <= 0:
            raise ValidationError("radius must be a positive number of meters")
        radius_m = int(radius_m)

        resolved = resolve_place_category(category, self._default_category)
        if category and resolved != category:
            logger.info("Unsupported category %r; using %r", category, resolved)

        response = self._provider.nearby_search(origin, radius_m, PLACE_TYPES[resolved])
        if response.status == STATUS_ZERO_RESULTS:
            raw_places = []
        elif response.status == STATUS_OK:
            raw_places = response.results
        else:
            message = f"Places provider error: {response.status}"
            if response.error_message:
                message = f"{message} ({response.error_message})"
            raise ProviderError(message, provider="places", status=response.status)

        places = [to_place(raw, category=resolved, origin=origin) for raw in raw_places]
        places.sort(key=lambda p: p.distance_km)

        self._store.create_search(origin=origin, category=resolved, radius_m=radius_m, address=address)
        if self._cache_places:
            for place in places:
                if self._store.get_place_by_place_id(place.place_id) is None:
                    self._store.create_place(place)

        logger.info("Place search category=%s radius_m=%d -> %d results", resolved, radius_m, len(places))
        return places
