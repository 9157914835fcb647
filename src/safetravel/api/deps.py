"""
Service wiring.

`build_services()` constructs the single `InMemoryStore` and every service that shares
it. The app factory keeps the result on `app.state.services`; routes receive it through
`Depends(get_services)`, and tests pass their own `Services` with stub providers.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import HTTPException, Request

from safetravel.alerts.service import AlertService
from safetravel.config.settings import Settings
from safetravel.core.cache import FileCache
from safetravel.core.env import resolve_project_path
from safetravel.ingestion.alert_feeds import ReliefWebAlertFeed, StaticAlertFeed
from safetravel.ingestion.base import AlertFeed
from safetravel.ingestion.google_geocoding import GoogleGeocodingClient
from safetravel.ingestion.google_places import GooglePlacesClient
from safetravel.search.geocoding import GeocodingService
from safetravel.search.places import PlaceSearchService
from safetravel.sos.service import SosService
from safetravel.storage.memory import InMemoryStore


@dataclass
class Services:
    settings: Settings
    store: InMemoryStore
    places: PlaceSearchService
    geocoding: GeocodingService
    alerts: AlertService
    sos: SosService


def build_cache(settings: Settings) -> FileCache:
    return FileCache(
        resolve_project_path(settings.cache.dir),
        enabled=settings.cache.enabled,
        default_ttl_seconds=settings.cache.default_ttl_seconds,
    )


def build_alert_feed(settings: Settings) -> AlertFeed:
    if settings.providers.alerts.source == "reliefweb":
        return ReliefWebAlertFeed(settings, build_cache(settings))
    return StaticAlertFeed(settings)


def build_services(settings: Settings, *, store: InMemoryStore | None = None) -> Services:
    store = store or InMemoryStore()
    return Services(
        settings=settings,
        store=store,
        places=PlaceSearchService(
            GooglePlacesClient(settings),
            store,
            default_category=settings.search.default_category,
            cache_places=settings.search.cache_places,
        ),
        geocoding=GeocodingService(GoogleGeocodingClient(settings)),
        alerts=AlertService(build_alert_feed(settings), store, min_count=settings.alerts.min_count),
        sos=SosService(store, settings.sos),
    )


def get_services(request: Request) -> Services:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(status_code=500, detail={"code": "INTERNAL_ERROR", "message": "Services not configured"})
    return services
