from community_events.services.contact_service import submit_contact_inquiry
from community_events.services.events_service import (
    cancel_event,
    create_event,
    delete_event,
    get_event,
    list_all_events,
    list_published_events,
    update_event,
)
from community_events.services.rsvp_service import reconcile_rsvp, submit_rsvp

__all__ = [
    "create_event",
    "update_event",
    "cancel_event",
    "delete_event",
    "get_event",
    "list_all_events",
    "list_published_events",
    "reconcile_rsvp",
    "submit_rsvp",
    "submit_contact_inquiry",
]
