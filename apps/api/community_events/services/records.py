"""Persistence-ready record shapes.

These are the only shapes handed to the gateway. Each one checks its own
invariants when it is built, so call sites never re-check them.
"""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from community_events.models.event import CalendarType, EventStatus, RecurrenceType

RSVP_MUTABLE_FIELDS = (
    "name",
    "phone",
    "guest_count",
    "dietary_restrictions",
    "notes",
    "reminder_email",
    "reminder_sms",
)


class RecordBase(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def values(self, **kwargs: Any) -> dict[str, Any]:
        return self.model_dump(mode="json", **kwargs)


class EventRecord(RecordBase):
    title: str = Field(min_length=1)
    slug: str
    description: str | None = None
    location: str = Field(min_length=1)
    start_date: str = Field(min_length=1)
    end_date: str | None = None
    calendar_type: CalendarType = CalendarType.COMMUNITY_GATHERING
    status: EventStatus = EventStatus.PUBLISHED
    host_name: str = Field(min_length=1)
    host_email: str = Field(min_length=1)
    featured_image_url: str | None = None
    is_recurring: bool = False
    recurrence_type: RecurrenceType = RecurrenceType.NONE
    recurrence_interval: int | None = None
    recurrence_end_date: str | None = None
    created_by: uuid.UUID | None = None

    @model_validator(mode="after")
    def _check_recurrence(self):
        if not self.is_recurring:
            if self.recurrence_type != RecurrenceType.NONE:
                raise ValueError("non-recurring events must have recurrence_type 'none'")
            if self.recurrence_interval is not None:
                raise ValueError("non-recurring events must not carry a recurrence_interval")
            if self.recurrence_end_date is not None:
                raise ValueError("non-recurring events must not carry a recurrence_end_date")
            return self

        if self.recurrence_type == RecurrenceType.NONE:
            raise ValueError("recurring events need a recurrence_type other than 'none'")
        if self.recurrence_interval is None or self.recurrence_interval < 1:
            raise ValueError("recurring events need a positive recurrence_interval")
        return self

    def insert_values(self) -> dict[str, Any]:
        return self.values()

    def update_values(self) -> dict[str, Any]:
        # created_by and slug are fixed at creation
        return self.values(exclude={"created_by", "slug"})


class RSVPRecord(RecordBase):
    event_id: uuid.UUID
    email: str = Field(min_length=1)
    name: str = Field(min_length=1)
    phone: str | None = None
    guest_count: int = Field(default=1, ge=1)
    dietary_restrictions: str | None = None
    notes: str | None = None
    reminder_email: bool = True
    reminder_sms: bool = False

    def key(self) -> dict[str, Any]:
        return {"event_id": str(self.event_id), "email": self.email}

    def attributes(self) -> dict[str, Any]:
        return self.values(include=set(RSVP_MUTABLE_FIELDS))


class ContactInquiryRecord(RecordBase):
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str | None = None
    address: str | None = None
    interest: str | None = None
    message: str = Field(min_length=1)
    processed: bool = False
