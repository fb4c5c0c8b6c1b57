from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

import structlog

from community_events.notifications.base import NotificationDispatcher

logger = structlog.get_logger(__name__)


class LoggingDispatcher(NotificationDispatcher):
    """Local development: record the notification instead of sending it."""

    def send(self, template_id: str, payload: Mapping[str, Any]) -> str:
        ack = str(uuid.uuid4())
        logger.info("notification_logged", template_id=template_id, ack=ack, keys=sorted(payload))
        return ack
