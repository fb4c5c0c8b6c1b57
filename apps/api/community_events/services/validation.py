"""Form validation.

Every validator takes the raw form record as the client sent it and returns
the list of human-readable errors, in the order the fields are checked. An
empty list means the form is valid. Nothing here touches the network.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from community_events.models.event import CalendarType, EventStatus, RecurrenceType
from community_events.services.transformers import as_utc, normalize_datetime_input

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MAX_GUEST_COUNT = 10

_CALENDAR_TYPES = {c.value for c in CalendarType}
_EVENT_STATUSES = {s.value for s in EventStatus}
_RECURRENCE_TYPES = {r.value for r in RecurrenceType}


def _text(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _enum_value(value: Any) -> str:
    return value.value if hasattr(value, "value") else str(value or "")


def is_valid_email(value: str | None) -> bool:
    if not value:
        return False
    return EMAIL_PATTERN.match(value) is not None


def is_valid_datetime(value: str) -> bool:
    try:
        as_utc(normalize_datetime_input(value))
    except ValueError:
        return False
    return True


def is_positive_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value > 0
    if isinstance(value, str):
        raw = value.strip()
        return raw.isdigit() and int(raw) > 0
    return False


def validate_contact_form(form: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []

    if not _text(form, "name"):
        errors.append("Name is required")
    if not _text(form, "email"):
        errors.append("Email is required")
    if not _text(form, "message"):
        errors.append("Message is required")

    # The pattern sees the email as typed, so blanks and padding fail it
    raw_email = str(form.get("email") or "")
    if raw_email and not is_valid_email(raw_email):
        errors.append("Please enter a valid email address")

    return errors


def validate_event_form(form: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []

    if not _text(form, "title"):
        errors.append("Title is required")
    if not _text(form, "location"):
        errors.append("Location is required")
    start_date = _text(form, "start_date")
    if not start_date:
        errors.append("Start date is required")
    elif not is_valid_datetime(start_date):
        errors.append("Please enter a valid start date")
    if not _text(form, "host_name"):
        errors.append("Host name is required")

    host_email = _text(form, "host_email")
    if not host_email:
        errors.append("Host email is required")
    elif not is_valid_email(host_email):
        errors.append("Please enter a valid host email address")

    calendar_type = form.get("calendar_type")
    if calendar_type is not None and _enum_value(calendar_type) not in _CALENDAR_TYPES:
        errors.append("Please choose a valid event type")

    status = form.get("status")
    if status is not None and _enum_value(status) not in _EVENT_STATUSES:
        errors.append("Please choose a valid event status")

    if form.get("is_recurring"):
        recurrence_type = _enum_value(form.get("recurrence_type"))
        if recurrence_type not in _RECURRENCE_TYPES or recurrence_type == RecurrenceType.NONE.value:
            errors.append("Recurring events need a repeat frequency")
        if not is_positive_integer(form.get("recurrence_interval")):
            errors.append("Repeat interval must be a positive whole number")

    return errors


def validate_rsvp_form(form: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []

    email = _text(form, "email")
    if not _text(form, "name"):
        errors.append("Name is required")
    if not email:
        errors.append("Email is required")
    elif not is_valid_email(email):
        errors.append("Please enter a valid email address")

    guest_count = form.get("guest_count", 1)
    if not is_positive_integer(guest_count) or int(guest_count) > MAX_GUEST_COUNT:
        errors.append(f"Guest count must be between 1 and {MAX_GUEST_COUNT}")

    return errors
