"""
Error taxonomy.

Every failure a caller can act on maps to one of these classes, so the API and CLI
can tell "address not found" apart from "service unavailable":

- `ValidationError`: required input missing or malformed (checked before any provider call)
- `ProviderError`: external API unreachable, or answered with a non-success status
- `NotFoundError`: a lookup (geocode, SOS alert) found nothing
- `ConfigurationError`: a required provider credential is absent
"""

from __future__ import annotations

from typing import Any


class SafeTravelError(Exception):
    """Base class for expected, caller-facing failures."""

    code = "INTERNAL_ERROR"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def as_detail(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class ValidationError(SafeTravelError):
    code = "VALIDATION_ERROR"
    http_status = 400


class NotFoundError(SafeTravelError):
    code = "NOT_FOUND"
    http_status = 404


class ConfigurationError(SafeTravelError):
    code = "CONFIGURATION_ERROR"
    http_status = 500


class ProviderError(SafeTravelError):
    """An upstream provider failed; `status` carries its status string (or HTTP code)."""

    code = "PROVIDER_ERROR"
    http_status = 502

    def __init__(self, message: str, *, provider: str, status: str | None = None):
        super().__init__(message)
        self.provider = provider
        self.status = status

    def as_detail(self) -> dict[str, Any]:
        detail = super().as_detail()
        detail["provider"] = self.provider
        detail["provider_status"] = self.status
        return detail
