from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

import structlog

from community_events.core.config import settings
from community_events.gateway.base import PersistenceGateway
from community_events.gateway.retry import with_retry
from community_events.models.event import CalendarType, EventStatus
from community_events.services.access import SessionContext
from community_events.services.error_codes import ErrorCode
from community_events.services.exceptions import (
    FormValidationError,
    NotFoundError,
    PermissionDeniedError,
)
from community_events.services.transformers import build_event_patch, build_event_record
from community_events.services.validation import validate_event_form

logger = structlog.get_logger(__name__)

EVENTS_TABLE = "events"
SEARCH_FIELDS = ("title", "description", "location")


def _require_authenticated(ctx: SessionContext) -> uuid.UUID:
    if not ctx.is_authenticated:
        raise PermissionDeniedError(ErrorCode.NOT_AUTHENTICATED.value, "sign in required")
    return ctx.user_id


def _require_author(ctx: SessionContext) -> uuid.UUID:
    user_id = _require_authenticated(ctx)
    if not ctx.capabilities.can_author_events:
        raise PermissionDeniedError(
            ErrorCode.NOT_EVENT_AUTHOR.value, "only admins, editors or authors can create events"
        )
    return user_id


def _require_manage_permission(ctx: SessionContext, event: Mapping[str, Any]) -> None:
    user_id = _require_authenticated(ctx)
    if ctx.capabilities.can_edit_any_event:
        return
    if event.get("created_by") != user_id:
        raise PermissionDeniedError(ErrorCode.NOT_EVENT_AUTHOR.value, "not the creator of this event")


def _validated(form: Mapping[str, Any]) -> Mapping[str, Any]:
    errors = validate_event_form(form)
    if errors:
        raise FormValidationError(errors)
    return form


def _matches(event: Mapping[str, Any], needle: str) -> bool:
    return any(needle in str(event.get(field) or "").lower() for field in SEARCH_FIELDS)


def get_event(gateway: PersistenceGateway, event_id: uuid.UUID) -> dict[str, Any]:
    rows = gateway.select(EVENTS_TABLE, {"id": event_id})
    if not rows:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, "event not found")
    return rows[0]


@with_retry(
    max_attempts=settings.events_read_retry_attempts,
    delay=settings.events_read_retry_delay,
    backoff=settings.events_read_retry_backoff,
)
def list_published_events(
    gateway: PersistenceGateway,
    search: str | None = None,
    calendar_type: CalendarType | str | None = None,
) -> list[dict[str, Any]]:
    filters: dict[str, Any] = {"status": EventStatus.PUBLISHED.value}
    if calendar_type:
        filters["calendar_type"] = CalendarType(calendar_type).value

    events = gateway.select(EVENTS_TABLE, filters, order_by="start_date")

    needle = (search or "").strip().lower()
    if needle:
        events = [event for event in events if _matches(event, needle)]

    counts: dict[Any, int] = {}
    if events:
        rsvps = gateway.select("event_rsvps", {"event_id": [event["id"] for event in events]})
        for rsvp in rsvps:
            counts[rsvp["event_id"]] = counts.get(rsvp["event_id"], 0) + 1

    return [{**event, "rsvp_count": counts.get(event["id"], 0)} for event in events]


def list_all_events(gateway: PersistenceGateway, ctx: SessionContext) -> list[dict[str, Any]]:
    _require_authenticated(ctx)
    if not ctx.capabilities.can_access_admin_panel:
        raise PermissionDeniedError(ErrorCode.ADMIN_ONLY.value, "admin panel access required")
    return gateway.select(EVENTS_TABLE, order_by="start_date", descending=True)


def create_event(gateway: PersistenceGateway, ctx: SessionContext, form: Mapping[str, Any]) -> dict[str, Any]:
    user_id = _require_author(ctx)
    record = build_event_record(_validated(form), created_by=user_id)

    event = gateway.insert(EVENTS_TABLE, record.insert_values())
    logger.info("event_created", event_id=str(event["id"]), slug=event["slug"], created_by=str(user_id))
    return event


def update_event(
    gateway: PersistenceGateway,
    ctx: SessionContext,
    event_id: uuid.UUID,
    form: Mapping[str, Any],
) -> dict[str, Any]:
    event = get_event(gateway, event_id)
    _require_manage_permission(ctx, event)

    patch = build_event_patch(_validated(form))
    gateway.update(EVENTS_TABLE, {"id": event_id}, patch)
    logger.info("event_updated", event_id=str(event_id), updated_by=str(ctx.user_id))
    return get_event(gateway, event_id)


def cancel_event(gateway: PersistenceGateway, ctx: SessionContext, event_id: uuid.UUID) -> dict[str, Any]:
    event = get_event(gateway, event_id)
    _require_manage_permission(ctx, event)

    gateway.update(EVENTS_TABLE, {"id": event_id}, {"status": EventStatus.CANCELLED.value})
    logger.info("event_cancelled", event_id=str(event_id), cancelled_by=str(ctx.user_id))
    return get_event(gateway, event_id)


def delete_event(gateway: PersistenceGateway, ctx: SessionContext, event_id: uuid.UUID) -> None:
    _require_authenticated(ctx)
    if not ctx.capabilities.can_delete_events:
        raise PermissionDeniedError(ErrorCode.ADMIN_ONLY.value, "only admins can delete events")
    get_event(gateway, event_id)

    gateway.delete(EVENTS_TABLE, {"id": event_id})
    logger.info("event_deleted", event_id=str(event_id), deleted_by=str(ctx.user_id))
