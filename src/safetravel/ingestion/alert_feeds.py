"""
Disaster alert feeds.

Two sources implement `AlertFeed`:
- `StaticAlertFeed`: packaged sample alerts (`config/sample_alerts.yaml`), handy for demos
  and offline development.
- `ReliefWebAlertFeed`: the ReliefWeb disasters API, cached on disk with stale-if-error so a
  short upstream outage still serves the last good list.

ReliefWeb has no severity field; severity is derived from the disaster status
(`alert` -> high, `current` -> medium, `past` -> low).
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Callable

import httpx
from pydantic import ValidationError as PydanticValidationError

from safetravel.config.settings import Settings, load_sample_alerts
from safetravel.core.cache import FileCache
from safetravel.core.errors import ProviderError
from safetravel.core.http import get_json
from safetravel.core.time import parse_datetime, utc_now
from safetravel.domain.models import Coordinate, DisasterAlert
from safetravel.ingestion.base import as_float

logger = logging.getLogger(__name__)

# ReliefWeb/GLIDE disaster type codes -> alert category.
RELIEFWEB_TYPE_CATEGORIES: dict[str, str] = {
    "EQ": "earthquake",
    "TS": "earthquake",
    "FL": "flood",
    "FF": "flood",
    "LS": "flood",
    "TC": "cyclone",
    "FR": "fire",
    "WF": "fire",
    "ST": "storm",
    "SS": "storm",
    "SW": "storm",
    "CW": "storm",
    "DR": "drought",
    "HT": "drought",
    "VO": "volcano",
    "TE": "hazmat",
    "CE": "hazmat",
}

RELIEFWEB_STATUS_SEVERITY: dict[str, str] = {
    "alert": "high",
    "current": "medium",
    "ongoing": "medium",
    "past": "low",
}

RELIEFWEB_FIELDS = [
    "name",
    "description",
    "status",
    "date.created",
    "primary_country.name",
    "primary_country.location",
    "primary_type.code",
    "url",
]


class StaticAlertFeed:
    """Serves the packaged sample alerts with publication times relative to `clock()`."""

    def __init__(self, settings: Settings, *, clock: Callable[[], datetime] = utc_now):
        self._settings = settings
        self._clock = clock

    def fetch_alerts(self) -> list[DisasterAlert]:
        now = self._clock()
        alerts: list[DisasterAlert] = []
        for entry in load_sample_alerts(self._settings.providers.alerts.static_path):
            payload = dict(entry)
            hours_ago = float(payload.pop("published_hours_ago", 0) or 0)
            payload.setdefault("published_at", now - timedelta(hours=hours_ago))
            alerts.append(DisasterAlert.model_validate(payload))
        return alerts


class ReliefWebAlertFeed:
    """Fetches recent disasters from ReliefWeb and maps them to `DisasterAlert`."""

    source_name = "ReliefWeb"

    def __init__(self, settings: Settings, cache: FileCache):
        self._settings = settings
        self._cache = cache

    def _fetch_reliefweb(self) -> dict[str, Any]:
        cfg = self._settings.providers.alerts
        params = {
            "appname": cfg.reliefweb_appname,
            "limit": cfg.limit,
            "sort[]": ["date.created:desc"],
            "fields[include][]": RELIEFWEB_FIELDS,
        }
        logger.info("Fetching ReliefWeb disasters limit=%d", cfg.limit)
        return get_json(cfg.reliefweb_url, params=params, timeout_seconds=self._settings.app.http_timeout_seconds)

    def _map_disaster(self, item: dict[str, Any]) -> DisasterAlert | None:
        fields = item.get("fields") or {}
        created = (fields.get("date") or {}).get("created")
        if not item.get("id") or not fields.get("name") or not created:
            return None

        country = fields.get("primary_country") or {}
        location = country.get("location") or {}
        lat = as_float(location.get("lat"))
        lon = as_float(location.get("lon"))
        type_code = str((fields.get("primary_type") or {}).get("code") or "").upper()
        status = str(fields.get("status") or "").lower()

        try:
            return DisasterAlert(
                id=f"reliefweb-{item['id']}",
                title=str(fields["name"]),
                description=str(fields.get("description") or fields["name"]).strip(),
                severity=RELIEFWEB_STATUS_SEVERITY.get(status, "medium"),
                category=RELIEFWEB_TYPE_CATEGORIES.get(type_code, "other"),
                location=str(country.get("name") or "Unknown"),
                source=self.source_name,
                url=fields.get("url"),
                published_at=parse_datetime(str(created)),
                coordinates=Coordinate(latitude=lat, longitude=lon) if lat is not None and lon is not None else None,
            )
        except (ValueError, PydanticValidationError):
            logger.warning("Skipping malformed ReliefWeb disaster id=%s", item.get("id"))
            return None

    def fetch_alerts(self) -> list[DisasterAlert]:
        cfg = self._settings.providers.alerts
        cache_key = f"reliefweb:{cfg.reliefweb_url}:{cfg.limit}"
        try:
            payload = self._cache.get_or_set(
                "alerts",
                cache_key,
                self._fetch_reliefweb,
                ttl_seconds=int(cfg.cache_ttl_seconds),
                stale_if_error=True,
                stale_predicate=lambda exc: isinstance(exc, httpx.HTTPError),
            )
        except httpx.HTTPStatusError as e:
            raise ProviderError(
                f"ReliefWeb returned HTTP {e.response.status_code}",
                provider="reliefweb",
                status=str(e.response.status_code),
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"ReliefWeb unreachable: {e}", provider="reliefweb") from e
        except ValueError as e:
            raise ProviderError("ReliefWeb returned invalid JSON", provider="reliefweb") from e

        alerts = []
        for item in (payload or {}).get("data") or []:
            mapped = self._map_disaster(item) if isinstance(item, dict) else None
            if mapped is not None:
                alerts.append(mapped)
        return alerts
