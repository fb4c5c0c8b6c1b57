from community_events.notifications.base import (
    CONTACT_EMAILS,
    EVENT_CONFIRMATION,
    NotificationDispatcher,
)
from community_events.notifications.dispatch import (
    create_dispatcher,
    dispatch_best_effort,
    get_dispatcher,
)

__all__ = [
    "CONTACT_EMAILS",
    "EVENT_CONFIRMATION",
    "NotificationDispatcher",
    "create_dispatcher",
    "dispatch_best_effort",
    "get_dispatcher",
]
