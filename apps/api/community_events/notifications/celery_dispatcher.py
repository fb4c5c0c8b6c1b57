from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from celery import Celery

from community_events.core.config import settings
from community_events.notifications.base import NotificationDispatcher


@lru_cache(maxsize=1)
def get_celery_app() -> Celery:
    app = Celery("community_events", broker=settings.celery_broker_url)
    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        task_ignore_result=True,
    )
    return app


class CeleryDispatcher(NotificationDispatcher):
    """Enqueue by task name; the mail worker lives outside this service."""

    def __init__(self, app: Celery | None = None) -> None:
        self._app = app or get_celery_app()

    def send(self, template_id: str, payload: Mapping[str, Any]) -> str:
        result = self._app.send_task(template_id, kwargs=dict(payload))
        return str(result.id)
