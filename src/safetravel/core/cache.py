from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import asdict, dataclass
from hashlib import sha256
from pathlib import Path
from typing import Any, Callable

"""
On-disk JSON cache for upstream feeds.

The ReliefWeb alert feed goes through `FileCache.get_or_set()` so that:
- repeated `/api/alerts` calls inside the TTL reuse one upstream response,
- an upstream outage is bridged with the last good payload ("stale-if-error").

Layout: `<base_dir>/<namespace>/<sha256(namespace:key)>.json`. Every file is an
`Envelope`; freshness is decided when reading, so expired files stay available
as stale fallbacks until they are overwritten.
"""

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Envelope:
    stored_at: float
    ttl_seconds: int
    value: Any

    def is_fresh(self, now: float, ttl_seconds: int | None = None) -> bool:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        return now - self.stored_at <= ttl


class FileCache:
    """JSON values on disk, addressed by (namespace, key)."""

    def __init__(self, base_dir: Path, enabled: bool = True, default_ttl_seconds: int = 86400):
        self.base_dir = Path(base_dir)
        self.enabled = enabled
        self.default_ttl_seconds = default_ttl_seconds

    def path_for(self, namespace: str, key: str) -> Path:
        name = sha256(f"{namespace}:{key}".encode("utf-8")).hexdigest()
        return self.base_dir / namespace / f"{name}.json"

    def _load(self, namespace: str, key: str) -> Envelope | None:
        if not self.enabled:
            return None
        path = self.path_for(namespace, key)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return Envelope(stored_at=float(raw["stored_at"]), ttl_seconds=int(raw["ttl_seconds"]), value=raw["value"])
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError):
            logger.warning("Ignoring unreadable cache file %s", path)
            return None

    def get(self, namespace: str, key: str, ttl_seconds: int | None = None) -> Any | None:
        """Return the value if it is still fresh, else None."""
        envelope = self._load(namespace, key)
        if envelope is None or not envelope.is_fresh(time.time(), ttl_seconds):
            return None
        return envelope.value

    def get_stale(self, namespace: str, key: str) -> Any | None:
        """Return the value regardless of age, else None."""
        envelope = self._load(namespace, key)
        return None if envelope is None else envelope.value

    def set(self, namespace: str, key: str, value: Any, ttl_seconds: int | None = None) -> None:
        if not self.enabled:
            return
        envelope = Envelope(
            stored_at=time.time(),
            ttl_seconds=int(self.default_ttl_seconds if ttl_seconds is None else ttl_seconds),
            value=value,
        )
        path = self.path_for(namespace, key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Write then rename so readers never see a half-written file.
        partial = path.with_name(f"{path.stem}.{os.getpid()}.part")
        partial.write_text(json.dumps(asdict(envelope), ensure_ascii=False), encoding="utf-8")
        partial.replace(path)

    def get_or_set(
        self,
        namespace: str,
        key: str,
        builder: Callable[[], Any],
        ttl_seconds: int | None = None,
        *,
        stale_if_error: bool = False,
        stale_predicate: Callable[[Exception], bool] | None = None,
    ) -> Any:
        """Return the fresh cached value or build, store and return a new one.

        When `builder()` raises and `stale_if_error` is set, an expired value is returned
        instead, provided `stale_predicate` (if given) accepts the exception.
        """
        fresh = self.get(namespace, key, ttl_seconds=ttl_seconds)
        if fresh is not None:
            return fresh

        try:
            value = builder()
        except Exception as exc:
            usable = stale_if_error and (stale_predicate is None or stale_predicate(exc))
            stale = self.get_stale(namespace, key) if usable else None
            if stale is None:
                raise
            logger.warning("Serving stale %s entry after upstream error: %s", namespace, exc)
            return stale

        self.set(namespace, key, value, ttl_seconds=ttl_seconds)
        return value
