from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from safetravel.domain.models import Coordinate, DisasterAlert

STATUS_OK = "OK"
STATUS_ZERO_RESULTS = "ZERO_RESULTS"


def as_float(value: Any) -> float | None:
    """Lenient numeric coercion for provider payloads; unparseable values become None."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def as_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class RawPlace:
    """Provider-neutral place record; provider clients map their wire format onto this."""

    place_id: str
    name: str
    latitude: float
    longitude: float
    vicinity: str | None = None
    formatted_address: str | None = None
    rating: float | None = None
    price_level: int | None = None
    open_now: bool | None = None
    phone_number: str | None = None
    website: str | None = None


@dataclass(frozen=True)
class NearbySearchResponse:
    status: str
    results: list[RawPlace] = field(default_factory=list)
    error_message: str | None = None


@dataclass(frozen=True)
class RawGeocodeResult:
    formatted_address: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeocodeResponse:
    status: str
    results: list[RawGeocodeResult] = field(default_factory=list)
    error_message: str | None = None


class PlacesProvider(Protocol):
    """Contract for nearby place search providers."""

    def nearby_search(self, origin: Coordinate, radius_m: int, place_type: str) -> NearbySearchResponse:
        """Return places of `place_type` within `radius_m` of `origin`.

        Transport failures raise `ProviderError`; provider-level statuses are
        returned as-is for the service layer to interpret.
        """
        raise NotImplementedError


class GeocodingProvider(Protocol):
    """Contract for forward geocoding providers."""

    def geocode(self, address: str) -> GeocodeResponse:
        raise NotImplementedError


class AlertFeed(Protocol):
    """Contract for disaster alert sources."""

    def fetch_alerts(self) -> list[DisasterAlert]:
        raise NotImplementedError
