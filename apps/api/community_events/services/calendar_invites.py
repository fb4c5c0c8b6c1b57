from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import quote, urlencode, urlparse

from icalendar import Calendar, Event as ICalEvent, vCalAddress, vText

from community_events.core.config import settings
from community_events.services.transformers import as_utc

DEFAULT_DURATION = timedelta(hours=2)
PRODID = "-//Community Events//Event Calendar//EN"


def event_window(event: Mapping[str, Any]) -> tuple[datetime, datetime]:
    start = as_utc(event["start_date"])
    end = as_utc(event.get("end_date")) or start + DEFAULT_DURATION
    return start, end


def _details(event: Mapping[str, Any]) -> str:
    return f"{event.get('description') or ''}\n\nHost: {event['host_name']}\nLocation: {event['location']}"


def _compact(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def google_calendar_url(event: Mapping[str, Any]) -> str:
    start, end = event_window(event)
    query = urlencode(
        {
            "action": "TEMPLATE",
            "text": event["title"],
            "dates": f"{_compact(start)}/{_compact(end)}",
            "details": _details(event),
            "location": event["location"],
        },
        quote_via=quote,
    )
    return f"https://calendar.google.com/calendar/render?{query}"


def outlook_calendar_url(event: Mapping[str, Any]) -> str:
    start, end = event_window(event)
    query = urlencode(
        {
            "subject": event["title"],
            "startdt": start.isoformat(),
            "enddt": end.isoformat(),
            "body": _details(event),
            "location": event["location"],
        },
        quote_via=quote,
    )
    return f"https://outlook.live.com/calendar/0/deeplink/compose?{query}"


def directions_url(event: Mapping[str, Any]) -> str:
    return f"https://www.google.com/maps/search/?api=1&query={quote(event['location'])}"


def calendar_links(event: Mapping[str, Any]) -> dict[str, str]:
    return {
        "google": google_calendar_url(event),
        "outlook": outlook_calendar_url(event),
        "ics": f"/v1/events/{event['id']}/calendar.ics",
        "directions": directions_url(event),
    }


def build_ics_invite(
    event: Mapping[str, Any],
    attendee_name: str | None = None,
    attendee_email: str | None = None,
) -> bytes:
    start, end = event_window(event)
    host = urlparse(settings.site_url).hostname or "localhost"

    cal = Calendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "REQUEST")

    description = f"{event.get('description') or ''}\n\nHost: {event['host_name']}"
    if attendee_name:
        description += f"\nRSVP confirmed for: {attendee_name}"

    vevent = ICalEvent()
    vevent.add("uid", f"{event['id']}@{host}")
    vevent.add("dtstamp", datetime.now(timezone.utc))
    vevent.add("dtstart", start)
    vevent.add("dtend", end)
    vevent.add("summary", event["title"])
    vevent.add("description", description)
    vevent.add("location", event["location"])
    vevent.add("status", "CONFIRMED")
    vevent.add("sequence", 0)

    organizer = vCalAddress(f"MAILTO:{event['host_email']}")
    organizer.params["cn"] = vText(event["host_name"])
    vevent["organizer"] = organizer

    if attendee_email:
        attendee = vCalAddress(f"MAILTO:{attendee_email}")
        if attendee_name:
            attendee.params["cn"] = vText(attendee_name)
        vevent.add("attendee", attendee, encode=0)

    cal.add_component(vevent)
    return cal.to_ical()
