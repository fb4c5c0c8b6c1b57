from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any

import structlog

from community_events.core.config import settings
from community_events.notifications.base import NotificationDispatcher

logger = structlog.get_logger(__name__)


def create_dispatcher(backend: str | None = None) -> NotificationDispatcher:
    selected = (backend or settings.notification_backend).strip().lower()
    if selected == "celery":
        from community_events.notifications.celery_dispatcher import CeleryDispatcher

        return CeleryDispatcher()
    if selected == "log":
        from community_events.notifications.log_dispatcher import LoggingDispatcher

        return LoggingDispatcher()
    raise ValueError(f"unsupported notification backend: {selected}")


@lru_cache(maxsize=1)
def get_dispatcher() -> NotificationDispatcher:
    return create_dispatcher()


def dispatch_best_effort(
    dispatcher: NotificationDispatcher,
    template_id: str,
    payload: Mapping[str, Any],
) -> bool:
    """Send and report whether it went out. Never raises.

    The record this notification is about has already been written, so a
    failed send must not turn the caller's success into a failure.
    """
    try:
        ack = dispatcher.send(template_id, payload)
    except Exception as exc:
        logger.warning(
            "notification_dispatch_failed",
            template_id=template_id,
            error=str(exc),
            exc_info=True,
        )
        return False
    logger.info("notification_dispatched", template_id=template_id, ack=ack)
    return True
