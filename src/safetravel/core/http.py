"""
Outbound HTTP.

Every provider client (Google Places, Google Geocoding, ReliefWeb) fetches JSON through
`get_json()`. Failures surface as `httpx` exceptions (or `ValueError` for a non-JSON
body); translating them into `ProviderError` is the caller's job because only the
caller knows which provider it is talking to.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

logger = logging.getLogger(__name__)

USER_AGENT = "safetravel/0.1.0"


def get_json(
    url: str,
    *,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout_seconds: float = 15,
) -> Any:
    """GET `url` and decode the JSON body; non-2xx responses raise `httpx.HTTPStatusError`."""
    started = time.perf_counter()
    with httpx.Client(timeout=timeout_seconds, headers={"User-Agent": USER_AGENT}) as client:
        response = client.get(url, params=params, headers=headers)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.debug("GET %s -> %s in %.0fms", response.url.copy_remove_param("key"), response.status_code, elapsed_ms)
    response.raise_for_status()
    return response.json()
