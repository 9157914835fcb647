"""Address -> coordinate resolution. A thin passthrough: no caching, no retries."""

from __future__ import annotations

import logging

from safetravel.core.errors import NotFoundError, ProviderError, ValidationError
from safetravel.domain.models import Coordinate, GeocodeResult
from safetravel.ingestion.base import STATUS_OK, STATUS_ZERO_RESULTS, GeocodingProvider

logger = logging.getLogger(__name__)


class GeocodingService:
    def __init__(self, provider: GeocodingProvider):
        self._provider = provider

    def geocode(self, address: str | None) -> GeocodeResult:
        address = (address or "").strip()
        if not address:
            raise ValidationError("Address is required")

        response = self._provider.geocode(address)
        if response.status == STATUS_ZERO_RESULTS or (response.status == STATUS_OK and not response.results):
            raise NotFoundError(f"No location found for address {address!r}")
        if response.status != STATUS_OK:
            message = f"Geocoding provider error: {response.status}"
            if response.error_message:
                message = f"{message} ({response.error_message})"
            raise ProviderError(message, provider="geocoding", status=response.status)

        best = response.results[0]
        return GeocodeResult(
            coordinate=Coordinate(latitude=best.latitude, longitude=best.longitude),
            formatted_address=best.formatted_address or address,
        )
