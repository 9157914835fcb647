"""Alert listing: pull the configured feed into the store and serve it newest first."""

from __future__ import annotations

import logging

from safetravel.alerts.ranking import rank_alerts
from safetravel.domain.models import Coordinate, DisasterAlert, RankedAlert
from safetravel.ingestion.base import AlertFeed
from safetravel.storage.memory import InMemoryStore

logger = logging.getLogger(__name__)


class AlertService:
    def __init__(self, feed: AlertFeed, store: InMemoryStore, *, min_count: int = 4):
        self._feed = feed
        self._store = store
        self._min_count = min_count

    def list_alerts(self) -> list[DisasterAlert]:
        fetched = self._feed.fetch_alerts()
        for alert in fetched:
            self._store.create_disaster_alert(alert)
        logger.debug("Alert feed returned %d alerts", len(fetched))
        return self._store.get_disaster_alerts()

    def ranked(self, user_location: Coordinate | None = None, min_count: int | None = None) -> list[RankedAlert]:
        count = self._min_count if min_count is None else min_count
        return rank_alerts(self.list_alerts(), user_location, count)
