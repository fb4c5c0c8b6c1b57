from community_events.api.v1.schemas.contact import ContactForm, ContactOut
from community_events.api.v1.schemas.events import (
    CalendarLinks,
    EventEditOut,
    EventForm,
    EventListOut,
    EventOut,
    PublicEventOut,
    RSVPForm,
    RSVPOut,
    RSVPStatus,
)

__all__ = [
    "CalendarLinks",
    "ContactForm",
    "ContactOut",
    "EventEditOut",
    "EventForm",
    "EventListOut",
    "EventOut",
    "PublicEventOut",
    "RSVPForm",
    "RSVPOut",
    "RSVPStatus",
]
