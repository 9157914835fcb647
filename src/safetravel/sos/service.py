"""
SOS dispatch.

`SosService.dispatch()` records the emergency, notifies the user's contacts over their
preferred channels, works out which authorities apply, and returns the nearest safe
places already known to the store (no provider call on the emergency path).

Notifications are best-effort: a failing sender is logged and reported as
`delivered=False` for that contact, and the dispatch carries on.
"""

from __future__ import annotations

import logging

from safetravel.config.settings import SosSettings
from safetravel.core.errors import NotFoundError
from safetravel.domain.models import (
    EmergencyContact,
    NotificationOutcome,
    Place,
    SosAlert,
    SosAlertRequest,
    SosDispatchResult,
)
from safetravel.sos.messages import SOS_SUBJECT, build_contact_message, maps_link
from safetravel.sos.notify import LoggingEmailSender, LoggingSmsSender, NotificationSender
from safetravel.storage.memory import InMemoryStore

logger = logging.getLogger(__name__)

CHANNELS_BY_PREFERENCE: dict[str, tuple[str, ...]] = {
    "sms": ("sms",),
    "email": ("email",),
    "both": ("sms", "email"),
}


class SosService:
    def __init__(
        self,
        store: InMemoryStore,
        settings: SosSettings,
        *,
        sms_sender: NotificationSender | None = None,
        email_sender: NotificationSender | None = None,
    ):
        self._store = store
        self._settings = settings
        self._senders: dict[str, NotificationSender] = {
            "sms": sms_sender or LoggingSmsSender(),
            "email": email_sender or LoggingEmailSender(),
        }

    def save_contact(self, contact: EmergencyContact) -> EmergencyContact:
        return self._store.upsert_contact(contact)

    def contacts(self, user_id: str) -> list[EmergencyContact]:
        return self._store.get_contacts(user_id)

    def _notify(self, alert: SosAlert, contact: EmergencyContact) -> list[NotificationOutcome]:
        message = build_contact_message(alert, contact, link_template=self._settings.maps_link_template)
        outcomes = []
        for channel in CHANNELS_BY_PREFERENCE[contact.notification_preference]:
            destination = contact.phone if channel == "sms" else contact.email
            try:
                delivered = self._senders[channel].send(destination, message, subject=SOS_SUBJECT)
            except Exception:
                logger.exception("SOS %s notification to contact %s failed", channel, contact.id)
                delivered = False
            outcomes.append(
                NotificationOutcome(
                    contact_id=contact.id, channel=channel, destination=destination, delivered=bool(delivered)
                )
            )
        return outcomes

    def _nearby_places(self, alert: SosAlert) -> list[Place]:
        category = "hospital" if alert.emergency_type == "medical" else None
        places = self._store.get_places_by_location(alert.location, self._settings.nearby_radius_m, category)
        return places[: self._settings.nearby_limit]

    def dispatch(self, request: SosAlertRequest) -> SosDispatchResult:
        alert = self._store.create_sos_alert(
            SosAlert(
                user_id=request.user_id,
                timestamp=request.timestamp,
                location=request.location,
                emergency_type=request.emergency_type,
            )
        )

        notifications: list[NotificationOutcome] = []
        for contact in self._store.get_contacts(alert.user_id):
            notifications.extend(self._notify(alert, contact))

        authorities = list(self._settings.authorities.get(alert.emergency_type, []))
        logger.warning(
            "SOS %s type=%s authorities=%s location=%s",
            alert.id,
            alert.emergency_type,
            ", ".join(authorities) or "none",
            maps_link(alert.location, self._settings.maps_link_template),
        )

        return SosDispatchResult(
            alert=alert,
            notifications=notifications,
            authorities=authorities,
            nearby_places=self._nearby_places(alert),
        )

    def resolve(self, alert_id: str) -> SosAlert:
        resolved = self._store.resolve_sos_alert(alert_id)
        if resolved is None:
            raise NotFoundError(f"SOS alert {alert_id!r} not found")
        return resolved
