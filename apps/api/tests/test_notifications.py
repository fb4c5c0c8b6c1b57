from __future__ import annotations

from types import SimpleNamespace

import pytest

from community_events.notifications import create_dispatcher, dispatch_best_effort
from community_events.notifications.celery_dispatcher import CeleryDispatcher
from community_events.notifications.log_dispatcher import LoggingDispatcher


class _FakeCelery:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []

    def send_task(self, name, kwargs=None):
        self.calls.append((name, kwargs))
        return SimpleNamespace(id="task-1")


def test_celery_dispatcher_enqueues_by_template_name():
    app = _FakeCelery()
    ack = CeleryDispatcher(app=app).send("send-event-confirmation", {"event_id": "e1"})
    assert ack == "task-1"
    assert app.calls == [("send-event-confirmation", {"event_id": "e1"})]


def test_backend_selection():
    assert isinstance(create_dispatcher("log"), LoggingDispatcher)
    assert isinstance(create_dispatcher(" Celery "), CeleryDispatcher)
    with pytest.raises(ValueError):
        create_dispatcher("carrier-pigeon")


def test_best_effort_reports_outcome(dispatcher, failing_dispatcher):
    assert dispatch_best_effort(dispatcher, "send-contact-emails", {"email": "a@b.co"}) is True
    assert dispatch_best_effort(failing_dispatcher, "send-contact-emails", {"email": "a@b.co"}) is False
