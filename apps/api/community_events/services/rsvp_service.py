from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from community_events.gateway.base import PersistenceGateway
from community_events.models.event import EventStatus
from community_events.notifications import EVENT_CONFIRMATION, NotificationDispatcher, dispatch_best_effort
from community_events.services.error_codes import ErrorCode
from community_events.services.exceptions import (
    ConflictError,
    FormValidationError,
    NotFoundError,
    PersistenceError,
)
from community_events.services.records import RSVPRecord
from community_events.services.transformers import build_rsvp_record
from community_events.services.validation import validate_rsvp_form

logger = structlog.get_logger(__name__)

RSVP_TABLE = "event_rsvps"


class RSVPOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


@dataclass(frozen=True)
class RSVPResult:
    outcome: RSVPOutcome
    rsvp: dict[str, Any]
    notified: bool


def _find_existing(gateway: PersistenceGateway, record: RSVPRecord) -> dict[str, Any] | None:
    rows = gateway.select(RSVP_TABLE, record.key())
    return rows[0] if rows else None


def _apply_update(gateway: PersistenceGateway, record: RSVPRecord, existing: dict[str, Any]) -> dict[str, Any]:
    attributes = record.attributes()
    gateway.update(RSVP_TABLE, {"id": existing["id"]}, attributes)
    return {**existing, **attributes}


def reconcile_rsvp(
    gateway: PersistenceGateway,
    dispatcher: NotificationDispatcher,
    record: RSVPRecord,
) -> RSVPResult:
    """Insert the RSVP, or update the one already held for (event_id, email).

    The lookup-then-write is only the fast path. If a concurrent submission
    wins the insert, the storage constraint rejects ours and we fall back to
    updating the winner's row.
    """
    existing = _find_existing(gateway, record)
    if existing is not None:
        row = _apply_update(gateway, record, existing)
        outcome = RSVPOutcome.UPDATED
    else:
        try:
            row = gateway.insert(RSVP_TABLE, record.values())
            outcome = RSVPOutcome.CREATED
        except PersistenceError as exc:
            if exc.code != ErrorCode.DUPLICATE_KEY.value:
                raise
            existing = _find_existing(gateway, record)
            if existing is None:
                raise
            logger.info("rsvp_insert_race_resolved", event_id=str(record.event_id))
            row = _apply_update(gateway, record, existing)
            outcome = RSVPOutcome.UPDATED

    logger.info("rsvp_recorded", event_id=str(record.event_id), outcome=outcome.value)

    notified = dispatch_best_effort(
        dispatcher,
        EVENT_CONFIRMATION,
        {
            "event_id": str(record.event_id),
            "attendee_email": record.email,
            "attendee_name": record.name,
        },
    )
    return RSVPResult(outcome=outcome, rsvp=row, notified=notified)


def submit_rsvp(
    gateway: PersistenceGateway,
    dispatcher: NotificationDispatcher,
    event_id: uuid.UUID,
    form: Mapping[str, Any],
) -> RSVPResult:
    errors = validate_rsvp_form(form)
    if errors:
        raise FormValidationError(errors)

    rows = gateway.select("events", {"id": event_id})
    if not rows:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, "event not found")
    status = rows[0]["status"]
    if status == EventStatus.CANCELLED:
        raise ConflictError(ErrorCode.EVENT_CANCELLED.value, "event is cancelled")
    if status != EventStatus.PUBLISHED:
        raise ConflictError(ErrorCode.EVENT_NOT_PUBLISHED.value, "event is not published")

    return reconcile_rsvp(gateway, dispatcher, build_rsvp_record(event_id, form))
