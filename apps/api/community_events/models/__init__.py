from community_events.models.base import Base
from community_events.models.contact_inquiry import ContactInquiry
from community_events.models.event import CalendarType, Event, EventStatus, RecurrenceType
from community_events.models.event_rsvp import EventRSVP
from community_events.models.user_role import AppRole, UserRole

__all__ = [
    "Base",
    "Event",
    "EventRSVP",
    "ContactInquiry",
    "UserRole",
    "AppRole",
    "CalendarType",
    "EventStatus",
    "RecurrenceType",
]
