"""
In-memory store.

One `InMemoryStore` is created at process start (see `safetravel.api.deps.build_services`)
and handed to every service that needs it; nothing here is a module-level singleton.

The store is append-mostly and single-writer: there are no locks, and all data is lost
on restart. Lookups that find nothing return `None` or an empty list.
"""

from __future__ import annotations

import logging

from safetravel.core.geo import haversine_km, haversine_m
from safetravel.domain.models import (
    Coordinate,
    DisasterAlert,
    EmergencyContact,
    Place,
    PlaceCategory,
    Search,
    SosAlert,
    new_id,
)

logger = logging.getLogger(__name__)


class InMemoryStore:
    def __init__(self) -> None:
        # Dicts keep insertion order, which doubles as the tie-breaker for equal timestamps.
        self._searches: dict[str, Search] = {}
        self._places: dict[str, Place] = {}
        self._alerts: dict[str, DisasterAlert] = {}
        self._contacts: dict[str, EmergencyContact] = {}
        self._sos_alerts: dict[str, SosAlert] = {}

    # --- searches ---

    def create_search(
        self,
        *,
        origin: Coordinate,
        category: PlaceCategory,
        radius_m: int = 5000,
        address: str | None = None,
    ) -> Search:
        search = Search(origin=origin, category=category, radius_m=radius_m, address=address or None)
        self._searches[search.id] = search
        return search

    def get_recent_searches(self, limit: int = 10) -> list[Search]:
        """Return up to `limit` searches, most recently created first."""
        if limit <= 0:
            return []
        ordered = list(self._searches.values())
        ordered.reverse()
        # Stable sort on a reversed list: equal timestamps keep newest-inserted first.
        ordered.sort(key=lambda s: s.created_at, reverse=True)
        return ordered[:limit]

    # --- places ---

    def create_place(self, place: Place) -> Place:
        """Insert a place record; duplicates by `place_id` are the caller's concern."""
        self._places[new_id()] = place
        return place

    def get_place_by_place_id(self, place_id: str) -> Place | None:
        return next((p for p in self._places.values() if p.place_id == place_id), None)

    def get_places_by_location(
        self,
        origin: Coordinate,
        radius_m: float,
        category: PlaceCategory | None = None,
    ) -> list[Place]:
        """Stored places within `radius_m` meters of `origin`, nearest first.

        Returned copies carry `distance_km` measured from `origin`.
        """
        matches: list[tuple[float, Place]] = []
        for place in self._places.values():
            if category is not None and place.category != category:
                continue
            if haversine_m(origin, place.coordinate) > radius_m:
                continue
            distance_km = haversine_km(origin, place.coordinate)
            matches.append((distance_km, place.model_copy(update={"distance_km": distance_km})))

        matches.sort(key=lambda m: m[0])
        return [place for _, place in matches]

    # --- disaster alerts ---

    def create_disaster_alert(self, alert: DisasterAlert) -> DisasterAlert:
        """Keep an alert keyed by its feed id (a blank id gets a generated one)."""
        if not alert.id:
            alert = alert.model_copy(update={"id": new_id()})
        self._alerts[alert.id] = alert
        return alert

    def get_disaster_alerts(self) -> list[DisasterAlert]:
        return sorted(self._alerts.values(), key=lambda a: a.published_at, reverse=True)

    # --- emergency contacts ---

    def upsert_contact(self, contact: EmergencyContact) -> EmergencyContact:
        self._contacts[contact.id] = contact
        return contact

    def get_contacts(self, user_id: str) -> list[EmergencyContact]:
        return [c for c in self._contacts.values() if c.user_id == user_id]

    # --- SOS alerts ---

    def create_sos_alert(self, alert: SosAlert) -> SosAlert:
        self._sos_alerts[alert.id] = alert
        return alert

    def get_sos_alert(self, alert_id: str) -> SosAlert | None:
        return self._sos_alerts.get(alert_id)

    def resolve_sos_alert(self, alert_id: str) -> SosAlert | None:
        alert = self._sos_alerts.get(alert_id)
        if alert is None:
            return None
        resolved = alert.model_copy(update={"status": "resolved"})
        self._sos_alerts[alert_id] = resolved
        logger.info("SOS alert %s resolved", alert_id)
        return resolved
