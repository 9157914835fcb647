"""
API routes.

Endpoints:
- GET  `/api/alerts`, `/api/alerts/ranked`: disaster alerts (optionally ranked by distance).
- POST `/api/places/search`: live nearby search through the places provider.
- GET  `/api/places/nearby`: places already cached in the store (no network).
- POST `/api/geocode`: address -> coordinate.
- GET  `/api/searches/recent`: search history, newest first.
- GET  `/api/settings`: public settings for the web UI (secrets redacted).
- `/api/sos/...`: emergency contacts and SOS dispatch.

Service errors are reported as `{"detail": {"code": ..., "message": ...}}`.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from safetravel.core.errors import SafeTravelError
from safetravel.domain.models import (
    Coordinate,
    DisasterAlert,
    EmergencyContact,
    GeocodeRequest,
    GeocodeResult,
    Place,
    PlaceCategory,
    PlaceSearchRequest,
    RankedAlert,
    Search,
    SosAlert,
    SosAlertRequest,
    SosDispatchResult,
)

from .deps import Services, get_services

logger = logging.getLogger(__name__)

router = APIRouter()


def _http_error(exc: SafeTravelError) -> HTTPException:
    if exc.http_status >= 500:
        logger.error("%s: %s", exc.code, exc.message)
    return HTTPException(status_code=exc.http_status, detail=exc.as_detail())


def _optional_location(lat: float | None, lon: float | None) -> Coordinate | None:
    if lat is None and lon is None:
        return None
    if lat is None or lon is None:
        raise HTTPException(
            status_code=400,
            detail={"code": "VALIDATION_ERROR", "message": "lat and lon must be provided together"},
        )
    return Coordinate(latitude=lat, longitude=lon)


@router.get("/api/alerts", response_model=list[DisasterAlert])
def get_alerts(services: Services = Depends(get_services)) -> list[DisasterAlert]:
    """Return the current alert feed, newest first."""
    try:
        return services.alerts.list_alerts()
    except SafeTravelError as e:
        raise _http_error(e) from e


@router.get("/api/alerts/ranked", response_model=list[RankedAlert])
def get_ranked_alerts(
    lat: float | None = None,
    lon: float | None = None,
    min_count: int | None = Query(default=None, ge=0),
    services: Services = Depends(get_services),
) -> list[RankedAlert]:
    """Return alerts nearest-first for a user location (feed order without one)."""
    location = _optional_location(lat, lon)
    try:
        return services.alerts.ranked(location, min_count)
    except SafeTravelError as e:
        raise _http_error(e) from e


@router.post("/api/places/search", response_model=list[Place])
def post_places_search(payload: PlaceSearchRequest, services: Services = Depends(get_services)) -> list[Place]:
    """Search nearby places of one category and return them nearest first."""
    try:
        return services.places.search(
            payload.origin(), payload.radius, payload.category, address=payload.address
        )
    except SafeTravelError as e:
        raise _http_error(e) from e


@router.get("/api/places/nearby", response_model=list[Place])
def get_places_nearby(
    lat: float,
    lon: float,
    radius: int = Query(default=5000, gt=0),
    category: PlaceCategory | None = None,
    services: Services = Depends(get_services),
) -> list[Place]:
    """Return places from earlier searches that fall within `radius` meters (no network)."""
    return services.store.get_places_by_location(Coordinate(latitude=lat, longitude=lon), radius, category)


@router.post("/api/geocode", response_model=GeocodeResult)
def post_geocode(payload: GeocodeRequest, services: Services = Depends(get_services)) -> GeocodeResult:
    try:
        return services.geocoding.geocode(payload.address)
    except SafeTravelError as e:
        raise _http_error(e) from e


@router.get("/api/searches/recent", response_model=list[Search])
def get_recent_searches(
    limit: int | None = Query(default=None, ge=1, le=100),
    services: Services = Depends(get_services),
) -> list[Search]:
    return services.store.get_recent_searches(limit or services.settings.search.recent_limit)


@router.get("/api/settings")
def get_public_settings(services: Services = Depends(get_services)) -> dict:
    """Return safe-to-expose settings for UI defaults (credentials removed)."""
    data = services.settings.model_dump(mode="json")
    data.get("providers", {}).get("google", {}).pop("api_key", None)
    return {
        "app": {"name": data["app"]["name"], "timezone": data["app"]["timezone"]},
        "search": data["search"],
        "alerts": {**data["alerts"], "source": data["providers"]["alerts"]["source"]},
        "sos": {"authorities": data["sos"]["authorities"]},
        "google_configured": bool(services.settings.providers.google.api_key),
    }


@router.get("/api/sos/contacts", response_model=list[EmergencyContact])
def get_sos_contacts(user_id: str, services: Services = Depends(get_services)) -> list[EmergencyContact]:
    return services.sos.contacts(user_id)


@router.post("/api/sos/contacts", response_model=EmergencyContact)
def post_sos_contact(contact: EmergencyContact, services: Services = Depends(get_services)) -> EmergencyContact:
    """Add or update an emergency contact (keyed by `id`)."""
    return services.sos.save_contact(contact)


@router.post("/api/sos/alerts", response_model=SosDispatchResult)
def post_sos_alert(payload: SosAlertRequest, services: Services = Depends(get_services)) -> SosDispatchResult:
    """Record an SOS, notify the user's contacts and list nearby safe places."""
    return services.sos.dispatch(payload)


@router.post("/api/sos/alerts/{alert_id}/resolve", response_model=SosAlert)
def post_sos_resolve(alert_id: str, services: Services = Depends(get_services)) -> SosAlert:
    try:
        return services.sos.resolve(alert_id)
    except SafeTravelError as e:
        raise _http_error(e) from e
