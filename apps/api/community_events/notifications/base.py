from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

EVENT_CONFIRMATION = "send-event-confirmation"
CONTACT_EMAILS = "send-contact-emails"


class NotificationDispatcher(ABC):
    @abstractmethod
    def send(self, template_id: str, payload: Mapping[str, Any]) -> str:
        """Hand a flat key/value payload to the sender and return its ack id."""
