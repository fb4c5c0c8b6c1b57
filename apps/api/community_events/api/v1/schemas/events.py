from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from community_events.models.event import CalendarType, EventStatus, RecurrenceType


def _assume_utc(value: datetime | None) -> datetime | None:
    # Stored instants are UTC; some drivers hand them back without an offset.
    if value is None:
        return value
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SchemaBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


class UTCMixin(BaseModel):
    @field_validator(
        "start_date",
        "end_date",
        "recurrence_end_date",
        "created_at",
        mode="after",
        check_fields=False,
    )
    @classmethod
    def _validate_utc(cls, value: datetime | None) -> datetime | None:
        return _assume_utc(value)


class EventForm(SchemaBase):
    """Admin event form state, as the browser holds it (strings, not yet typed)."""

    title: str = ""
    description: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    calendar_type: str = CalendarType.COMMUNITY_GATHERING.value
    status: str = EventStatus.PUBLISHED.value
    host_name: str = ""
    host_email: str = ""
    featured_image_url: str = ""
    is_recurring: bool = False
    recurrence_type: str = RecurrenceType.NONE.value
    recurrence_interval: int | str | None = 1
    recurrence_end_date: str = ""


class EventOut(UTCMixin, SchemaBase):
    id: UUID
    title: str
    slug: str
    description: str | None = None
    location: str
    start_date: datetime
    end_date: datetime | None = None
    calendar_type: CalendarType
    status: EventStatus
    featured_image_url: str | None = None
    host_name: str
    host_email: str
    is_recurring: bool
    recurrence_type: RecurrenceType
    recurrence_interval: int | None = None
    recurrence_end_date: datetime | None = None
    created_by: UUID | None = None
    created_at: datetime


class CalendarLinks(SchemaBase):
    google: str
    outlook: str
    ics: str
    directions: str


class PublicEventOut(EventOut):
    rsvp_count: int = Field(default=0, ge=0)
    calendar_links: CalendarLinks | None = None


class EventListOut(SchemaBase):
    items: list[PublicEventOut]
    total: int = Field(ge=0)


class EventEditOut(SchemaBase):
    event: EventOut
    form: EventForm


class RSVPForm(SchemaBase):
    name: str = ""
    email: str = ""
    phone: str = ""
    guest_count: int | str = 1
    dietary_restrictions: str = ""
    notes: str = ""
    reminder_email: bool = True
    reminder_sms: bool = False


class RSVPStatus(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


class RSVPOut(SchemaBase):
    status: RSVPStatus
    event_id: UUID
    email: str
    name: str
    guest_count: int
    confirmation_sent: bool
    message: str
