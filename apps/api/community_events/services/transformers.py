"""Form state -> persistence records.

The transformers assume the form already passed validation and do not
re-check it.
"""

from __future__ import annotations

import re
import unicodedata
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from community_events.models.event import CalendarType, EventStatus, RecurrenceType
from community_events.services.records import ContactInquiryRecord, EventRecord, RSVPRecord

# A datetime-local input: minutes precision, no seconds, no offset.
LOCAL_DATETIME = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")
_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")
_NON_SLUG = re.compile(r"[^a-z0-9]+")


def normalize_datetime_input(value: str | None) -> str | None:
    """Rewrite ``YYYY-MM-DDTHH:MM`` as ``YYYY-MM-DDTHH:MM:00.000Z``.

    This is a string rewrite, not a conversion: the wall-clock value the user
    typed is stored as if it were already UTC. Anything else is returned as is.
    """
    if value is None:
        return None
    if LOCAL_DATETIME.fullmatch(value):
        return f"{value}:00.000Z"
    return value


def empty_to_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_integer(value: Any) -> int | None:
    """Leading-integer parse: ``"12"`` and ``"12 weeks"`` give 12, ``"x"`` gives None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INTEGER.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def slugify(title: str) -> str:
    """Lower-case, strip accents, then collapse every non ``[a-z0-9]`` run into one hyphen.

    Accent stripping departs from a pure character-class rule on purpose, so
    ``"Kam\u00e1l"`` gives ``kamal`` rather than ``kam-l``.
    """
    decomposed = unicodedata.normalize("NFKD", title.lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _NON_SLUG.sub("-", stripped).strip("-")


def _enum(enum_cls, value: Any, default):
    if value is None or value == "":
        return default
    return enum_cls(value.value if hasattr(value, "value") else value)


def build_event_record(form: Mapping[str, Any], created_by: uuid.UUID | None = None) -> EventRecord:
    title = str(form.get("title") or "").strip()
    is_recurring = bool(form.get("is_recurring"))

    if is_recurring:
        recurrence_type = _enum(RecurrenceType, form.get("recurrence_type"), RecurrenceType.NONE)
        recurrence_interval = parse_integer(form.get("recurrence_interval"))
        recurrence_end_date = normalize_datetime_input(empty_to_none(form.get("recurrence_end_date")))
    else:
        recurrence_type = RecurrenceType.NONE
        recurrence_interval = None
        recurrence_end_date = None

    return EventRecord(
        title=title,
        slug=slugify(title),
        description=empty_to_none(form.get("description")),
        location=str(form.get("location") or "").strip(),
        start_date=normalize_datetime_input(str(form.get("start_date") or "").strip()),
        end_date=normalize_datetime_input(empty_to_none(form.get("end_date"))),
        calendar_type=_enum(CalendarType, form.get("calendar_type"), CalendarType.COMMUNITY_GATHERING),
        status=_enum(EventStatus, form.get("status"), EventStatus.PUBLISHED),
        host_name=str(form.get("host_name") or "").strip(),
        host_email=str(form.get("host_email") or "").strip(),
        featured_image_url=empty_to_none(form.get("featured_image_url")),
        is_recurring=is_recurring,
        recurrence_type=recurrence_type,
        recurrence_interval=recurrence_interval,
        recurrence_end_date=recurrence_end_date,
        created_by=created_by,
    )


def build_event_patch(form: Mapping[str, Any]) -> dict[str, Any]:
    return build_event_record(form).update_values()


def build_contact_inquiry(form: Mapping[str, Any]) -> ContactInquiryRecord:
    return ContactInquiryRecord(
        name=str(form.get("name") or "").strip(),
        email=str(form.get("email") or "").strip().lower(),
        phone=empty_to_none(form.get("phone")),
        address=empty_to_none(form.get("address")),
        interest=empty_to_none(form.get("interest")),
        message=str(form.get("message") or "").strip(),
    )


def normalize_email(value: Any) -> str:
    return str(value or "").strip().lower()


def build_rsvp_record(event_id: uuid.UUID, form: Mapping[str, Any]) -> RSVPRecord:
    guest_count = parse_integer(form.get("guest_count"))
    return RSVPRecord(
        event_id=event_id,
        email=normalize_email(form.get("email")),
        name=str(form.get("name") or "").strip(),
        phone=empty_to_none(form.get("phone")),
        guest_count=guest_count if guest_count and guest_count > 0 else 1,
        dietary_restrictions=empty_to_none(form.get("dietary_restrictions")),
        notes=empty_to_none(form.get("notes")),
        reminder_email=bool(form.get("reminder_email", True)),
        reminder_sms=bool(form.get("reminder_sms", False)),
    )


def as_utc(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def event_form_from_record(event: Mapping[str, Any]) -> dict[str, Any]:
    """Inverse direction, for pre-filling the admin edit form."""
    start = as_utc(event.get("start_date"))
    end = as_utc(event.get("end_date"))
    recurrence_end = as_utc(event.get("recurrence_end_date"))
    return {
        "title": event.get("title") or "",
        "description": event.get("description") or "",
        "location": event.get("location") or "",
        "start_date": start.strftime("%Y-%m-%dT%H:%M") if start else "",
        "end_date": end.strftime("%Y-%m-%dT%H:%M") if end else "",
        "calendar_type": _enum(CalendarType, event.get("calendar_type"), CalendarType.COMMUNITY_GATHERING).value,
        "status": _enum(EventStatus, event.get("status"), EventStatus.PUBLISHED).value,
        "host_name": event.get("host_name") or "",
        "host_email": event.get("host_email") or "",
        "featured_image_url": event.get("featured_image_url") or "",
        "is_recurring": bool(event.get("is_recurring")),
        "recurrence_type": _enum(RecurrenceType, event.get("recurrence_type"), RecurrenceType.NONE).value,
        "recurrence_interval": event.get("recurrence_interval") or 1,
        "recurrence_end_date": recurrence_end.strftime("%Y-%m-%d") if recurrence_end else "",
    }
