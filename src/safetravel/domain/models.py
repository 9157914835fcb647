"""
Domain models (Pydantic).

These types represent the stable "contract" between layers:
- service inputs (`Coordinate`, `PlaceSearchRequest`, `SosAlertRequest`)
- entities held by the in-memory store (`Search`, `Place`, `DisasterAlert`, `SosAlert`)
- API/CLI outputs (`RankedAlert`, `GeocodeResult`, `SosDispatchResult`)

Optional fields use `None` for "unknown"; a missing rating is never reported as 0.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, get_args
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from safetravel.core.time import utc_now

PlaceCategory = Literal["hospital", "pharmacy", "lodging", "restaurant"]
AlertSeverity = Literal["low", "medium", "high", "critical"]
AlertCategory = Literal[
    "earthquake", "flood", "cyclone", "fire", "storm", "drought", "volcano", "hazmat", "other"
]
EmergencyType = Literal["harassment", "medical", "accident"]
NotificationPreference = Literal["sms", "email", "both"]
NotificationChannel = Literal["sms", "email"]

PLACE_CATEGORIES: tuple[str, ...] = get_args(PlaceCategory)
DEFAULT_PLACE_CATEGORY: PlaceCategory = "hospital"


def new_id() -> str:
    return uuid4().hex


def resolve_place_category(value: str | None, default: PlaceCategory = DEFAULT_PLACE_CATEGORY) -> PlaceCategory:
    """Map free-form input onto a supported category, falling back to `default`."""
    candidate = (value or "").strip().lower()
    if candidate in PLACE_CATEGORIES:
        return candidate  # type: ignore[return-value]
    return default


class Coordinate(BaseModel):
    """A latitude/longitude pair in decimal degrees (not range-checked)."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class Place(BaseModel):
    """A point of interest; `distance_km` is relative to the query origin that produced it."""

    place_id: str
    name: str
    address: str
    category: PlaceCategory
    coordinate: Coordinate
    rating: float | None = Field(default=None, ge=0, le=5)
    price_level: int | None = Field(default=None, ge=0, le=4)
    is_open: bool | None = None
    phone_number: str | None = None
    website: str | None = None
    distance_km: float = Field(default=0.0, ge=0)


class Search(BaseModel):
    """One recorded place search (history/audit entry)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    origin: Coordinate
    address: str | None = None
    radius_m: int = Field(default=5000, gt=0)
    category: PlaceCategory
    created_at: datetime = Field(default_factory=utc_now)


class DisasterAlert(BaseModel):
    """A hazard notice from an alert feed."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    severity: AlertSeverity
    category: AlertCategory = "other"
    location: str
    source: str
    url: str | None = None
    published_at: datetime
    coordinates: Coordinate | None = None


class RankedAlert(BaseModel):
    """An alert plus its distance from the user; `None` means the distance was not computed."""

    alert: DisasterAlert
    distance_km: float | None = None


class GeocodeResult(BaseModel):
    coordinate: Coordinate
    formatted_address: str


class PlaceSearchRequest(BaseModel):
    """Body of `POST /api/places/search` (origin is checked by the service)."""

    latitude: float | None = None
    longitude: float | None = None
    radius: int = 5000
    category: str | None = DEFAULT_PLACE_CATEGORY
    address: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def _non_string_category_is_unset(cls, value: object) -> object:
        # Non-string categories resolve to the default, like unknown names.
        return value if value is None or isinstance(value, str) else None

    def origin(self) -> Coordinate | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class GeocodeRequest(BaseModel):
    address: str | None = None


class EmergencyContact(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    name: str
    phone: str = ""
    email: str = ""
    relationship: str = ""
    notification_preference: NotificationPreference = "both"


class SosAlertRequest(BaseModel):
    user_id: str
    location: Coordinate
    emergency_type: EmergencyType
    timestamp: datetime = Field(default_factory=utc_now)


class SosAlert(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    timestamp: datetime
    location: Coordinate
    emergency_type: EmergencyType
    status: Literal["active", "resolved"] = "active"


class NotificationOutcome(BaseModel):
    contact_id: str
    channel: NotificationChannel
    destination: str
    delivered: bool


class SosDispatchResult(BaseModel):
    alert: SosAlert
    notifications: list[NotificationOutcome] = Field(default_factory=list)
    authorities: list[str] = Field(default_factory=list)
    nearby_places: list[Place] = Field(default_factory=list)
