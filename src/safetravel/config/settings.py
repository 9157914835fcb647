# src/safetravel/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/safetravel/config/defaults.yaml`, then optionally overridden by:
- environment variables (e.g., `GOOGLE_API_KEY`, `SAFETRAVEL_LOG_LEVEL`)
- an external YAML file via `SAFETRAVEL_CONFIG_PATH`

Design rule:
- Provider URLs and tuning knobs live in YAML, not hard-coded in service logic.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from safetravel.core.env import load_dotenv_if_present


def _read_package_yaml(filename: str) -> Any:
    """Read a YAML file packaged inside `safetravel.config`."""
    text = resources.files("safetravel.config").joinpath(filename).read_text(encoding="utf-8")
    return yaml.safe_load(text)


def _read_package_yaml_mapping(filename: str) -> dict[str, Any]:
    data = _read_package_yaml(filename) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "SafeTravel"
    timezone: str = "UTC"
    http_timeout_seconds: float = 15
    log_level: str = "INFO"


class CacheSettings(BaseModel):
    enabled: bool = True
    dir: str = ".cache/safetravel"
    default_ttl_seconds: int = 60 * 60 * 24


class GoogleSettings(BaseModel):
    places_url: str = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
    geocode_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    api_key: str | None = None


class AlertFeedSettings(BaseModel):
    source: Literal["static", "reliefweb"] = "static"
    static_path: str = "sample_alerts.yaml"
    reliefweb_url: str = "https://api.reliefweb.int/v1/disasters"
    reliefweb_appname: str = "safetravel"
    limit: int = Field(20, ge=1, le=1000)
    cache_ttl_seconds: int = 300


class ProvidersSettings(BaseModel):
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    alerts: AlertFeedSettings = Field(default_factory=AlertFeedSettings)


class SearchSettings(BaseModel):
    default_radius_m: int = Field(5000, gt=0)
    default_category: Literal["hospital", "pharmacy", "lodging", "restaurant"] = "hospital"
    recent_limit: int = Field(10, ge=1)
    cache_places: bool = True


class AlertsSettings(BaseModel):
    min_count: int = Field(4, ge=0)


class SosSettings(BaseModel):
    maps_link_template: str = "https://www.google.com/maps?q={lat},{lon}"
    nearby_radius_m: int = Field(5000, gt=0)
    nearby_limit: int = Field(5, ge=0)
    authorities: dict[str, list[str]] = Field(
        default_factory=lambda: {
            "harassment": ["police", "tourism-police"],
            "medical": ["ambulance", "hospitals"],
            "accident": ["police", "ambulance"],
        }
    )


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    providers: ProvidersSettings = Field(default_factory=ProvidersSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    alerts: AlertsSettings = Field(default_factory=AlertsSettings)
    sos: SosSettings = Field(default_factory=SosSettings)


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small to avoid exposing unsafe overrides.
    """
    load_dotenv_if_present()
    data = dict(data)
    cache_dir = os.getenv("SAFETRAVEL_CACHE_DIR")
    if cache_dir:
        data.setdefault("cache", {})["dir"] = cache_dir

    log_level = os.getenv("SAFETRAVEL_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    alerts_source = os.getenv("SAFETRAVEL_ALERTS_SOURCE")
    if alerts_source:
        data.setdefault("providers", {}).setdefault("alerts", {})["source"] = alerts_source.strip().lower()

    api_key = os.getenv("GOOGLE_API_KEY")
    if api_key:
        data.setdefault("providers", {}).setdefault("google", {})["api_key"] = api_key

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("SAFETRAVEL_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml_mapping("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml_mapping("logging.yaml")


def load_sample_alerts(filename: str) -> list[dict[str, Any]]:
    """Load the packaged static alert feed entries."""
    data = _read_package_yaml(filename) or []
    if isinstance(data, dict):
        data = data.get("alerts") or []
    if not isinstance(data, list):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a list of alerts.")
    return [item for item in data if isinstance(item, dict)]
