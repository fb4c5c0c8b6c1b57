from __future__ import annotations

import os
import uuid
from collections.abc import Mapping
from typing import Any

import pytest
from fastapi.testclient import TestClient

# Settings are read at import, so the environment has to be in place first
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["ENV"] = "local"
os.environ["AUTH_MODE"] = "dev"
os.environ.setdefault("JWT_SECRET", "test_jwt_secret_32_chars_minimum")
os.environ.setdefault("NOTIFICATION_BACKEND", "log")
os.environ["THROTTLE_ENABLED"] = "false"
os.environ.setdefault("EVENTS_READ_RETRY_DELAY", "0")

from community_events.db import SessionLocal, create_schema, drop_schema  # noqa: E402
from community_events.gateway.sql import SqlAlchemyGateway  # noqa: E402
from community_events.main import app  # noqa: E402
from community_events.models import AppRole, UserRole  # noqa: E402
from community_events.notifications import NotificationDispatcher, get_dispatcher  # noqa: E402


class RecordingDispatcher(NotificationDispatcher):
    def __init__(self) -> None:
        self.sent: list[tuple[str, dict[str, Any]]] = []

    def send(self, template_id: str, payload: Mapping[str, Any]) -> str:
        self.sent.append((template_id, dict(payload)))
        return f"ack-{len(self.sent)}"


class FailingDispatcher(NotificationDispatcher):
    def __init__(self) -> None:
        self.attempts = 0

    def send(self, template_id: str, payload: Mapping[str, Any]) -> str:
        self.attempts += 1
        raise RuntimeError("mail relay unreachable")


@pytest.fixture(autouse=True)
def clean_db():
    # Fresh schema for every test
    create_schema()
    yield
    drop_schema()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def client(dispatcher: RecordingDispatcher):
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def gateway() -> SqlAlchemyGateway:
    return SqlAlchemyGateway(SessionLocal)


@pytest.fixture
def grant_role(db_session):
    def _grant(*roles: AppRole, user_id: uuid.UUID | None = None) -> uuid.UUID:
        user_id = user_id or uuid.uuid4()
        for role in roles:
            db_session.add(UserRole(user_id=user_id, role=role))
        db_session.commit()
        return user_id

    return _grant


def auth_headers(user_id: uuid.UUID) -> dict[str, str]:
    return {"Authorization": f"Bearer dev_{user_id}"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def failing_dispatcher() -> FailingDispatcher:
    return FailingDispatcher()
