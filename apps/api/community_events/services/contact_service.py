from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog

from community_events.gateway.base import PersistenceGateway
from community_events.notifications import CONTACT_EMAILS, NotificationDispatcher, dispatch_best_effort
from community_events.services.exceptions import FormValidationError
from community_events.services.transformers import build_contact_inquiry
from community_events.services.validation import validate_contact_form

logger = structlog.get_logger(__name__)

SENT_TITLE = "Message sent successfully!"
SENT_DESCRIPTION = (
    "Thank you for reaching out. Check your email for confirmation "
    "and we'll get back to you soon."
)
SAVED_TITLE = "Message saved successfully!"
SAVED_DESCRIPTION = (
    "Your message was saved but confirmation email may be delayed. "
    "We'll get back to you soon."
)


@dataclass(frozen=True)
class ContactSubmission:
    inquiry: dict[str, Any]
    notified: bool

    @property
    def title(self) -> str:
        return SENT_TITLE if self.notified else SAVED_TITLE

    @property
    def description(self) -> str:
        return SENT_DESCRIPTION if self.notified else SAVED_DESCRIPTION


def submit_contact_inquiry(
    gateway: PersistenceGateway,
    dispatcher: NotificationDispatcher,
    form: Mapping[str, Any],
) -> ContactSubmission:
    errors = validate_contact_form(form)
    if errors:
        raise FormValidationError(errors)

    record = build_contact_inquiry(form)
    inquiry = gateway.insert("contact_inquiries", record.values())
    logger.info("contact_inquiry_saved", inquiry_id=str(inquiry["id"]))

    notified = dispatch_best_effort(dispatcher, CONTACT_EMAILS, record.values(exclude={"processed"}))
    return ContactSubmission(inquiry=inquiry, notified=notified)
