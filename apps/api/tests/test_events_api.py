from __future__ import annotations

import uuid

from fastapi.testclient import TestClient
from sqlalchemy import select

from community_events.main import app
from community_events.models import AppRole, EventRSVP
from community_events.notifications import get_dispatcher


def _event_payload(**overrides):
    payload = {
        "title": "Community Gathering & Prayer",
        "description": "Songs and prayers",
        "location": "170 Valencia St, San Francisco",
        "start_date": "2025-07-31T18:00",
        "end_date": "",
        "calendar_type": "community_gathering",
        "status": "published",
        "host_name": "Layla",
        "host_email": "layla@example.org",
    }
    payload.update(overrides)
    return payload


def _create(client: TestClient, headers, **overrides):
    return client.post("/v1/events", json=_event_payload(**overrides), headers=headers)


def test_author_can_create_event(client: TestClient, grant_role, headers_for):
    author = grant_role(AppRole.AUTHOR)

    resp = _create(client, headers_for(author))
    assert resp.status_code == 200
    body = resp.json()
    assert body["slug"] == "community-gathering-prayer"
    assert body["created_by"] == str(author)
    assert body["start_date"].startswith("2025-07-31T18:00:00")
    assert body["end_date"] is None
    assert body["recurrence_type"] == "none"
    assert body["recurrence_interval"] is None


def test_create_requires_sign_in(client: TestClient):
    resp = client.post("/v1/events", json=_event_payload())
    assert resp.status_code == 401


def test_signed_in_user_without_role_cannot_create(client: TestClient, headers_for):
    resp = _create(client, headers_for(uuid.uuid4()))
    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "NOT_EVENT_AUTHOR"


def test_invalid_event_form_lists_errors(client: TestClient, grant_role, headers_for):
    author = grant_role(AppRole.AUTHOR)

    resp = _create(client, headers_for(author), title=" ", is_recurring=True, recurrence_type="none")
    assert resp.status_code == 422
    assert resp.json()["detail"]["errors"] == [
        "Title is required",
        "Recurring events need a repeat frequency",
    ]


def test_unparseable_start_date_is_a_form_error(client: TestClient, grant_role, headers_for):
    author = grant_role(AppRole.AUTHOR)

    resp = _create(client, headers_for(author), start_date="2025-13-45T10:00")
    assert resp.status_code == 422
    assert resp.json()["detail"]["errors"] == ["Please enter a valid start date"]


def test_update_keeps_slug_and_creator(client: TestClient, grant_role, headers_for):
    author = grant_role(AppRole.AUTHOR)
    editor = grant_role(AppRole.EDITOR)
    event_id = _create(client, headers_for(author)).json()["id"]

    resp = client.patch(
        f"/v1/events/{event_id}",
        json=_event_payload(title="Renamed Gathering", is_recurring=True, recurrence_type="weekly", recurrence_interval="2"),
        headers=headers_for(editor),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Renamed Gathering"
    assert body["slug"] == "community-gathering-prayer"
    assert body["created_by"] == str(author)
    assert body["recurrence_type"] == "weekly"
    assert body["recurrence_interval"] == 2


def test_other_author_cannot_edit_or_cancel(client: TestClient, grant_role, headers_for):
    owner = grant_role(AppRole.AUTHOR)
    stranger = grant_role(AppRole.AUTHOR)
    event_id = _create(client, headers_for(owner)).json()["id"]

    resp = client.patch(f"/v1/events/{event_id}", json=_event_payload(), headers=headers_for(stranger))
    assert resp.status_code == 403

    resp = client.post(f"/v1/events/{event_id}/cancel", headers=headers_for(stranger))
    assert resp.status_code == 403

    resp = client.post(f"/v1/events/{event_id}/cancel", headers=headers_for(owner))
    assert resp.status_code == 200
    assert resp.json()["status"] == "cancelled"


def test_only_admin_can_delete(client: TestClient, grant_role, headers_for):
    editor = grant_role(AppRole.EDITOR)
    admin = grant_role(AppRole.ADMIN)
    event_id = _create(client, headers_for(editor)).json()["id"]

    resp = client.delete(f"/v1/events/{event_id}", headers=headers_for(editor))
    assert resp.status_code == 403
    assert resp.json()["detail"]["code"] == "ADMIN_ONLY"

    resp = client.delete(f"/v1/events/{event_id}", headers=headers_for(admin))
    assert resp.status_code == 204

    assert client.get(f"/v1/events/{event_id}").status_code == 404


def test_public_listing_shows_published_only_with_counts(client: TestClient, grant_role, headers_for):
    author = grant_role(AppRole.AUTHOR)
    headers = headers_for(author)
    later = _create(client, headers, title="Youth Study Circle", start_date="2025-09-01T17:00",
                    calendar_type="study_circle").json()
    sooner = _create(client, headers, title="Devotional", start_date="2025-08-01T10:00",
                     calendar_type="devotional").json()
    _create(client, headers, title="Draft Plans", status="draft")

    client.post(f"/v1/events/{sooner['id']}/rsvp", json={"name": "Ali", "email": "ali@example.org"})
    client.post(f"/v1/events/{sooner['id']}/rsvp", json={"name": "Sara", "email": "sara@example.org"})

    resp = client.get("/v1/events")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 2
    assert [item["id"] for item in body["items"]] == [sooner["id"], later["id"]]
    assert [item["rsvp_count"] for item in body["items"]] == [2, 0]

    by_type = client.get("/v1/events", params={"calendar_type": "study_circle"}).json()
    assert [item["title"] for item in by_type["items"]] == ["Youth Study Circle"]

    searched = client.get("/v1/events", params={"search": "DEVOT"}).json()
    assert [item["title"] for item in searched["items"]] == ["Devotional"]


def test_draft_event_is_hidden_from_public_reads(client: TestClient, grant_role, headers_for):
    author = grant_role(AppRole.AUTHOR)
    draft = _create(client, headers_for(author), status="draft").json()

    assert client.get(f"/v1/events/{draft['id']}").status_code == 404
    assert client.get(f"/v1/events/{draft['id']}/calendar.ics").status_code == 404


def test_public_event_carries_calendar_links(client: TestClient, grant_role, headers_for):
    author = grant_role(AppRole.AUTHOR)
    event = _create(client, headers_for(author)).json()

    links = client.get(f"/v1/events/{event['id']}").json()["calendar_links"]
    assert links["ics"] == f"/v1/events/{event['id']}/calendar.ics"
    assert client.get(links["ics"]).status_code == 200
    assert "dates=20250731T180000Z%2F20250731T200000Z" in links["google"]
    assert links["outlook"].startswith("https://outlook.live.com/calendar/0/deeplink/compose?")
    assert links["directions"].endswith("query=170%20Valencia%20St%2C%20San%20Francisco")

    listed = client.get("/v1/events").json()["items"][0]
    assert listed["calendar_links"] == links


def test_calendar_download(client: TestClient, grant_role, headers_for):
    author = grant_role(AppRole.AUTHOR)
    event = _create(client, headers_for(author)).json()

    resp = client.get(f"/v1/events/{event['id']}/calendar.ics")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/calendar")
    assert 'filename="community-gathering-prayer.ics"' in resp.headers["content-disposition"]
    assert b"BEGIN:VEVENT" in resp.content


def test_rsvp_create_then_update(client: TestClient, grant_role, headers_for, dispatcher):
    author = grant_role(AppRole.AUTHOR)
    event_id = _create(client, headers_for(author)).json()["id"]

    first = client.post(
        f"/v1/events/{event_id}/rsvp",
        json={"name": "Ali", "email": "ali@example.org", "guest_count": 2},
    )
    assert first.status_code == 200
    assert first.json()["status"] == "created"
    assert first.json()["confirmation_sent"] is True

    second = client.post(
        f"/v1/events/{event_id}/rsvp",
        json={"name": "Ali R.", "email": "Ali@Example.org", "guest_count": "4"},
    )
    assert second.status_code == 200
    body = second.json()
    assert body["status"] == "updated"
    assert body["name"] == "Ali R."
    assert body["guest_count"] == 4
    assert body["message"].startswith("RSVP updated!")

    assert len(dispatcher.sent) == 2
    listing = client.get("/v1/events").json()
    assert listing["items"][0]["rsvp_count"] == 1


def test_rsvp_email_case_does_not_split_attendees(client: TestClient, grant_role, headers_for, db_session):
    author = grant_role(AppRole.AUTHOR)
    event_id = _create(client, headers_for(author)).json()["id"]

    first = client.post(f"/v1/events/{event_id}/rsvp", json={"name": "Ali", "email": "Ali@Example.org"})
    second = client.post(f"/v1/events/{event_id}/rsvp", json={"name": "Ali", "email": "ali@example.org"})

    assert first.json()["status"] == "created"
    assert second.json()["status"] == "updated"
    assert first.json()["email"] == second.json()["email"] == "ali@example.org"
    rows = db_session.scalars(select(EventRSVP).where(EventRSVP.event_id == uuid.UUID(event_id))).all()
    assert len(rows) == 1


def test_rsvp_survives_notification_failure(client: TestClient, grant_role, headers_for, failing_dispatcher):
    author = grant_role(AppRole.AUTHOR)
    event_id = _create(client, headers_for(author)).json()["id"]
    app.dependency_overrides[get_dispatcher] = lambda: failing_dispatcher

    resp = client.post(f"/v1/events/{event_id}/rsvp", json={"name": "Ali", "email": "ali@example.org"})
    assert resp.status_code == 200
    assert resp.json()["confirmation_sent"] is False
    assert resp.json()["message"] == "RSVP Confirmed! Your confirmation email may be delayed."


def test_rsvp_rejected_for_cancelled_event(client: TestClient, grant_role, headers_for):
    author = grant_role(AppRole.AUTHOR)
    event_id = _create(client, headers_for(author)).json()["id"]
    client.post(f"/v1/events/{event_id}/cancel", headers=headers_for(author))

    resp = client.post(f"/v1/events/{event_id}/rsvp", json={"name": "Ali", "email": "ali@example.org"})
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "EVENT_CANCELLED"


def test_admin_panel_lists_every_status(client: TestClient, grant_role, headers_for):
    author = grant_role(AppRole.AUTHOR)
    editor = grant_role(AppRole.EDITOR)
    _create(client, headers_for(author), status="draft")
    _create(client, headers_for(author))

    assert client.get("/v1/admin/events", headers=headers_for(author)).status_code == 403
    assert client.get("/v1/admin/events").status_code == 401

    resp = client.get("/v1/admin/events", headers=headers_for(editor))
    assert resp.status_code == 200
    assert sorted(event["status"] for event in resp.json()) == ["draft", "published"]


def test_admin_edit_form_is_prefilled(client: TestClient, grant_role, headers_for):
    admin = grant_role(AppRole.ADMIN)
    event_id = _create(
        client,
        headers_for(admin),
        is_recurring=True,
        recurrence_type="monthly",
        recurrence_interval=3,
        recurrence_end_date="2026-06-30",
    ).json()["id"]

    resp = client.get(f"/v1/admin/events/{event_id}", headers=headers_for(admin))
    assert resp.status_code == 200
    form = resp.json()["form"]
    assert form["start_date"] == "2025-07-31T18:00"
    assert form["end_date"] == ""
    assert form["recurrence_type"] == "monthly"
    assert form["recurrence_interval"] == 3
    assert form["recurrence_end_date"] == "2026-06-30"
