from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from community_events.api.errors import http_error_from_service
from community_events.api.v1.schemas import EventEditOut, EventForm, EventOut
from community_events.auth.deps import AdminPanel, Gateway, require_admin_panel
from community_events.services import get_event, list_all_events
from community_events.services.exceptions import ServiceError
from community_events.services.transformers import event_form_from_record

router = APIRouter(
    prefix="/admin/events",
    tags=["admin"],
    dependencies=[Depends(require_admin_panel)],
)


@router.get("", response_model=list[EventOut])
def list_events(gateway: Gateway, ctx: AdminPanel):
    try:
        events = list_all_events(gateway, ctx)
    except ServiceError as exc:
        raise http_error_from_service(exc) from exc
    return [EventOut.model_validate(event) for event in events]


@router.get("/{event_id}", response_model=EventEditOut)
def read_event_for_edit(event_id: UUID, gateway: Gateway):
    try:
        event = get_event(gateway, event_id)
    except ServiceError as exc:
        raise http_error_from_service(exc) from exc
    return EventEditOut(
        event=EventOut.model_validate(event),
        form=EventForm.model_validate(event_form_from_record(event)),
    )
