from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from community_events.auth.jwt import create_access_token, verify_access_token
from community_events.models import AppRole


def test_anonymous_me(client: TestClient):
    resp = client.get("/v1/me")
    assert resp.status_code == 200
    body = resp.json()
    assert body["authenticated"] is False
    assert body["roles"] == []
    assert not any(body["capabilities"].values())


def test_me_reports_roles_and_capabilities(client: TestClient, grant_role, headers_for):
    user_id = grant_role(AppRole.AUTHOR, AppRole.EDITOR)

    resp = client.get("/v1/me", headers=headers_for(user_id))
    assert resp.status_code == 200
    body = resp.json()
    assert body["user_id"] == str(user_id)
    assert body["roles"] == ["author", "editor"]
    assert body["capabilities"] == {
        "can_access_admin_panel": True,
        "can_author_events": True,
        "can_edit_any_event": True,
        "can_delete_events": False,
    }


@pytest.mark.parametrize(
    "header",
    ["Token abc", "Bearer abc", "Bearer dev_not-a-uuid"],
)
def test_bad_credentials_are_rejected(client: TestClient, header):
    resp = client.get("/v1/me", headers={"Authorization": header})
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


def test_access_token_round_trip():
    user_id = uuid.uuid4()
    assert verify_access_token(create_access_token(user_id)) == user_id


def test_expired_or_tampered_tokens_fail():
    token = create_access_token(uuid.uuid4(), ttl_seconds=-10)
    with pytest.raises(ValueError):
        verify_access_token(token)

    with pytest.raises(ValueError):
        verify_access_token(create_access_token(uuid.uuid4()) + "x")


def test_health_and_request_id(client: TestClient):
    resp = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
    assert resp.headers["x-request-id"] == "req-123"

    assert client.get("/health").headers["x-request-id"]
