"""
Google Maps Platform ingestion client (Places Nearby Search).

This module is responsible only for:
- attaching the API key and calling the Nearby Search endpoint,
- translating transport failures into `ProviderError`,
- mapping Google's wire format (`geometry.location`, `vicinity`, `opening_hours.open_now`, ...)
  onto the provider-neutral `RawPlace`.

Interpreting statuses, computing distances and ordering results belong to
`safetravel.search.places`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from safetravel.config.settings import Settings
from safetravel.core.errors import ConfigurationError, ProviderError
from safetravel.core.http import get_json
from safetravel.domain.models import Coordinate
from safetravel.ingestion.base import NearbySearchResponse, RawPlace, as_float, as_int

logger = logging.getLogger(__name__)

PROVIDER_NAME = "google"


class GoogleMapsClient:
    """Shared plumbing for Google Maps web service endpoints."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def _require_api_key(self) -> str:
        """Return the configured API key or raise if missing."""
        api_key = self._settings.providers.google.api_key
        if not api_key:
            raise ConfigurationError("Google API key is not configured. Set GOOGLE_API_KEY.")
        return api_key

    def _get(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        """GET a Google endpoint; any transport/HTTP/JSON failure becomes `ProviderError`."""
        query = {**params, "key": self._require_api_key()}
        try:
            payload = get_json(url, params=query, timeout_seconds=self._settings.app.http_timeout_seconds)
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"Google API returned HTTP {e.response.status_code}",
                provider=PROVIDER_NAME,
                status=str(e.response.status_code),
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Google API unreachable: {e}", provider=PROVIDER_NAME) from e
        except ValueError as e:
            raise ProviderError("Google API returned invalid JSON", provider=PROVIDER_NAME) from e

        if not isinstance(payload, dict):
            raise ProviderError("Google API returned an unexpected payload", provider=PROVIDER_NAME)
        return payload


class GooglePlacesClient(GoogleMapsClient):
    """Nearby Search client implementing `PlacesProvider`."""

    @staticmethod
    def _parse_place(item: dict[str, Any]) -> RawPlace | None:
        location = (item.get("geometry") or {}).get("location") or {}
        lat = as_float(location.get("lat"))
        lng = as_float(location.get("lng"))
        place_id = item.get("place_id")
        if lat is None or lng is None or not place_id:
            return None

        opening_hours = item.get("opening_hours")
        open_now = opening_hours.get("open_now") if isinstance(opening_hours, dict) else None

        return RawPlace(
            place_id=str(place_id),
            name=str(item.get("name") or ""),
            latitude=lat,
            longitude=lng,
            vicinity=item.get("vicinity") or None,
            formatted_address=item.get("formatted_address") or None,
            rating=as_float(item.get("rating")),
            price_level=as_int(item.get("price_level")),
            open_now=open_now if isinstance(open_now, bool) else None,
            phone_number=item.get("formatted_phone_number") or None,
            website=item.get("website") or None,
        )

    def nearby_search(self, origin: Coordinate, radius_m: int, place_type: str) -> NearbySearchResponse:
        logger.info(
            "Google nearby search lat=%.4f lon=%.4f radius_m=%d type=%s",
            origin.latitude,
            origin.longitude,
            radius_m,
            place_type,
        )
        payload = self._get(
            self._settings.providers.google.places_url,
            {
                "location": f"{origin.latitude},{origin.longitude}",
                "radius": int(radius_m),
                "type": place_type,
            },
        )

        results: list[RawPlace] = []
        skipped = 0
        for item in payload.get("results") or []:
            parsed = self._parse_place(item) if isinstance(item, dict) else None
            if parsed is None:
                skipped += 1
                continue
            results.append(parsed)
        if skipped:
            logger.warning("Skipped %d Google place records without id/location", skipped)

        return NearbySearchResponse(
            status=str(payload.get("status") or "UNKNOWN_ERROR"),
            results=results,
            error_message=payload.get("error_message"),
        )
