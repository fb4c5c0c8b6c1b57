from fastapi import APIRouter

from community_events.api.errors import http_error_from_service
from community_events.api.v1.schemas import ContactForm, ContactOut
from community_events.auth.deps import Dispatcher, Gateway
from community_events.services import submit_contact_inquiry
from community_events.services.exceptions import ServiceError

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post("", response_model=ContactOut)
def submit(payload: ContactForm, gateway: Gateway, dispatcher: Dispatcher):
    try:
        result = submit_contact_inquiry(gateway, dispatcher, payload.model_dump())
    except ServiceError as exc:
        raise http_error_from_service(exc) from exc

    return ContactOut(
        inquiry_id=result.inquiry["id"],
        title=result.title,
        description=result.description,
        confirmation_sent=result.notified,
    )
