"""
Notification senders.

Real SMS/email delivery is out of scope; these senders log what would be sent.
Swap in a gateway-backed implementation of `NotificationSender` to deliver for real.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class NotificationSender(Protocol):
    def send(self, destination: str, message: str, *, subject: str | None = None) -> bool:
        """Deliver `message`; return False when the destination cannot be used."""
        raise NotImplementedError


class LoggingSmsSender:
    def send(self, destination: str, message: str, *, subject: str | None = None) -> bool:
        if not destination.strip():
            return False
        logger.info("Simulated SMS to %s:\n%s", destination, message)
        return True


class LoggingEmailSender:
    def send(self, destination: str, message: str, *, subject: str | None = None) -> bool:
        if "@" not in destination:
            return False
        logger.info("Simulated email to %s\nSubject: %s\n%s", destination, subject or "", message)
        return True
