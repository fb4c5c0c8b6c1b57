from __future__ import annotations

import uuid
from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from community_events.gateway.sql import _to_persistence_error
from community_events.models import EventStatus
from community_events.services.exceptions import PersistenceError


def _event(gateway, title, start, status="published"):
    return gateway.insert(
        "events",
        {
            "title": title,
            "slug": title.lower(),
            "location": "Center",
            "start_date": start,
            "status": status,
            "host_name": "Layla",
            "host_email": "layla@example.org",
        },
    )


def test_insert_returns_stored_row_with_defaults(gateway):
    row = _event(gateway, "Feast", "2025-07-31T18:00:00.000Z")
    assert isinstance(row["id"], uuid.UUID)
    assert row["status"] == EventStatus.PUBLISHED
    assert row["start_date"].replace(tzinfo=None) == datetime(2025, 7, 31, 18, 0)
    assert row["is_recurring"] is False
    assert row["created_at"] is not None


def test_select_filters_orders_and_matches_lists(gateway):
    b = _event(gateway, "B", "2025-08-02T10:00:00.000Z")
    a = _event(gateway, "A", "2025-08-01T10:00:00.000Z")
    _event(gateway, "C", "2025-08-03T10:00:00.000Z", status="draft")

    rows = gateway.select("events", {"status": "published"}, order_by="start_date")
    assert [row["title"] for row in rows] == ["A", "B"]

    rows = gateway.select("events", order_by="start_date", descending=True)
    assert [row["title"] for row in rows] == ["C", "B", "A"]

    rows = gateway.select("events", {"id": [str(a["id"]), b["id"]]}, order_by="title")
    assert [row["title"] for row in rows] == ["A", "B"]

    assert gateway.select("events", {"end_date": None, "title": "A"})[0]["id"] == a["id"]


def test_update_and_delete(gateway):
    row = _event(gateway, "Feast", "2025-07-31T18:00:00.000Z")
    gateway.update("events", {"id": row["id"]}, {"status": "cancelled", "end_date": "2025-07-31T20:00:00.000Z"})

    stored = gateway.select("events", {"id": row["id"]})[0]
    assert stored["status"] == EventStatus.CANCELLED
    assert stored["end_date"].replace(tzinfo=None) == datetime(2025, 7, 31, 20, 0)

    gateway.delete("events", {"id": row["id"]})
    assert gateway.select("events", {"id": row["id"]}) == []


def test_unkeyed_writes_are_refused(gateway):
    with pytest.raises(PersistenceError):
        gateway.update("events", {}, {"status": "cancelled"})
    with pytest.raises(PersistenceError):
        gateway.delete("events", {})


def test_unknown_table_and_column(gateway):
    with pytest.raises(PersistenceError, match="does not exist"):
        gateway.select("attendees")
    with pytest.raises(PersistenceError, match="does not exist"):
        gateway.select("events", {"colour": "red"})


def test_bad_uuid_is_a_persistence_error(gateway):
    with pytest.raises(PersistenceError, match="invalid input syntax for type uuid"):
        gateway.select("events", {"id": "not-a-uuid"})


def test_operational_errors_are_network_errors():
    err = _to_persistence_error(OperationalError("SELECT 1", {}, Exception("could not connect to server")))
    assert err.code == "network"
    assert err.message.startswith("Network error:")
