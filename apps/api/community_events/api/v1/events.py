from uuid import UUID

from fastapi import APIRouter, Query, Response

from community_events.api.errors import http_error_from_service
from community_events.api.v1.schemas import (
    EventForm,
    EventListOut,
    EventOut,
    PublicEventOut,
    RSVPForm,
    RSVPOut,
    RSVPStatus,
)
from community_events.auth.deps import Dispatcher, Gateway, SignedIn
from community_events.gateway import PersistenceGateway
from community_events.models.event import CalendarType, EventStatus
from community_events.services import (
    cancel_event,
    create_event,
    delete_event,
    get_event,
    list_published_events,
    submit_rsvp,
    update_event,
)
from community_events.services.calendar_invites import build_ics_invite, calendar_links
from community_events.services.error_codes import ErrorCode
from community_events.services.exceptions import NotFoundError, ServiceError
from community_events.services.rsvp_service import RSVPOutcome

router = APIRouter(prefix="/events", tags=["events"])

RSVP_MESSAGES = {
    (RSVPOutcome.CREATED, True): "RSVP Confirmed! You'll receive a confirmation email with calendar invite shortly.",
    (RSVPOutcome.UPDATED, True): "RSVP updated! You'll receive a fresh confirmation email shortly.",
    (RSVPOutcome.CREATED, False): "RSVP Confirmed! Your confirmation email may be delayed.",
    (RSVPOutcome.UPDATED, False): "RSVP updated! Your confirmation email may be delayed.",
}


def _published_event(gateway: PersistenceGateway, event_id: UUID) -> dict:
    event = get_event(gateway, event_id)
    # Drafts and cancelled events are not public.
    if event["status"] != EventStatus.PUBLISHED:
        raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, "event not found")
    return event



def _public(event: dict) -> PublicEventOut:
    return PublicEventOut.model_validate({**event, "calendar_links": calendar_links(event)})

@router.get("", response_model=EventListOut)
def list_events(
    gateway: Gateway,
    search: str | None = Query(default=None, max_length=200),
    calendar_type: CalendarType | None = Query(default=None),
):
    try:
        events = list_published_events(gateway, search=search, calendar_type=calendar_type)
    except ServiceError as exc:
        raise http_error_from_service(exc) from exc
    items = [_public(event) for event in events]
    return EventListOut(items=items, total=len(items))


@router.get("/{event_id}", response_model=PublicEventOut)
def read_event(event_id: UUID, gateway: Gateway):
    try:
        event = _published_event(gateway, event_id)
    except ServiceError as exc:
        raise http_error_from_service(exc) from exc
    return _public(event)


@router.get("/{event_id}/calendar.ics")
def event_calendar_invite(event_id: UUID, gateway: Gateway):
    try:
        event = _published_event(gateway, event_id)
    except ServiceError as exc:
        raise http_error_from_service(exc) from exc
    return Response(
        content=build_ics_invite(event),
        media_type="text/calendar",
        headers={"Content-Disposition": f'attachment; filename="{event["slug"] or "event"}.ics"'},
    )


@router.post("/{event_id}/rsvp", response_model=RSVPOut)
def rsvp(event_id: UUID, payload: RSVPForm, gateway: Gateway, dispatcher: Dispatcher):
    try:
        result = submit_rsvp(gateway, dispatcher, event_id, payload.model_dump())
    except ServiceError as exc:
        raise http_error_from_service(exc) from exc

    return RSVPOut(
        status=RSVPStatus(result.outcome.value),
        event_id=event_id,
        email=result.rsvp["email"],
        name=result.rsvp["name"],
        guest_count=result.rsvp["guest_count"],
        confirmation_sent=result.notified,
        message=RSVP_MESSAGES[(result.outcome, result.notified)],
    )


@router.post("", response_model=EventOut)
def create(payload: EventForm, gateway: Gateway, ctx: SignedIn):
    try:
        event = create_event(gateway, ctx, payload.model_dump())
    except ServiceError as exc:
        raise http_error_from_service(exc) from exc
    return EventOut.model_validate(event)


@router.patch("/{event_id}", response_model=EventOut)
def update(event_id: UUID, payload: EventForm, gateway: Gateway, ctx: SignedIn):
    try:
        event = update_event(gateway, ctx, event_id, payload.model_dump())
    except ServiceError as exc:
        raise http_error_from_service(exc) from exc
    return EventOut.model_validate(event)


@router.post("/{event_id}/cancel", response_model=EventOut)
def cancel(event_id: UUID, gateway: Gateway, ctx: SignedIn):
    try:
        event = cancel_event(gateway, ctx, event_id)
    except ServiceError as exc:
        raise http_error_from_service(exc) from exc
    return EventOut.model_validate(event)


@router.delete("/{event_id}", status_code=204)
def delete(event_id: UUID, gateway: Gateway, ctx: SignedIn):
    try:
        delete_event(gateway, ctx, event_id)
    except ServiceError as exc:
        raise http_error_from_service(exc) from exc
    return Response(status_code=204)
