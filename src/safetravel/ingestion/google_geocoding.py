"""Google Geocoding API client (forward geocoding only)."""

from __future__ import annotations

import logging
from typing import Any

from safetravel.ingestion.base import GeocodeResponse, RawGeocodeResult, as_float
from safetravel.ingestion.google_places import GoogleMapsClient

logger = logging.getLogger(__name__)


class GoogleGeocodingClient(GoogleMapsClient):
    """Implements `GeocodingProvider` on top of the Google Geocoding endpoint."""

    @staticmethod
    def _parse_result(item: dict[str, Any]) -> RawGeocodeResult | None:
        location = (item.get("geometry") or {}).get("location") or {}
        lat = as_float(location.get("lat"))
        lng = as_float(location.get("lng"))
        if lat is None or lng is None:
            return None
        return RawGeocodeResult(
            formatted_address=str(item.get("formatted_address") or ""),
            latitude=lat,
            longitude=lng,
        )

    def geocode(self, address: str) -> GeocodeResponse:
        logger.info("Google geocode address=%r", address)
        payload = self._get(self._settings.providers.google.geocode_url, {"address": address})

        results = []
        for item in payload.get("results") or []:
            parsed = self._parse_result(item) if isinstance(item, dict) else None
            if parsed is not None:
                results.append(parsed)

        return GeocodeResponse(
            status=str(payload.get("status") or "UNKNOWN_ERROR"),
            results=results,
            error_message=payload.get("error_message"),
        )
