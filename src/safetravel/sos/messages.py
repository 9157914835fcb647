"""Text for SOS notifications."""

from __future__ import annotations

from safetravel.domain.models import Coordinate, EmergencyContact, SosAlert

DEFAULT_MAPS_LINK_TEMPLATE = "https://www.google.com/maps?q={lat},{lon}"

EMERGENCY_DESCRIPTIONS: dict[str, str] = {
    "harassment": "reported harassment",
    "medical": "needs urgent medical assistance",
    "accident": "has been in an accident",
}

SOS_SUBJECT = "SOS Alert"


def maps_link(location: Coordinate, template: str = DEFAULT_MAPS_LINK_TEMPLATE) -> str:
    return template.format(lat=location.latitude, lon=location.longitude)


def build_contact_message(
    alert: SosAlert, contact: EmergencyContact, *, link_template: str = DEFAULT_MAPS_LINK_TEMPLATE
) -> str:
    situation = EMERGENCY_DESCRIPTIONS.get(alert.emergency_type, "needs help")
    return "\n".join(
        [
            "EMERGENCY SOS ALERT",
            "",
            f"{contact.name}, this is an emergency notification.",
            "",
            f"Your contact {situation} and needs immediate assistance.",
            "",
            f"Location: {maps_link(alert.location, link_template)}",
            f"Sent at: {alert.timestamp.isoformat()}",
            "",
            "If you received this message, please:",
            "1. Try to contact them immediately",
            "2. Share this location with relevant authorities",
            "3. Proceed to their location if possible",
            "4. Reply to confirm you received this alert",
            "",
            "This is an automated message from the SafeTravel emergency response system.",
        ]
    )
