from fastapi import APIRouter

from community_events.api.v1.admin_events import router as admin_events_router
from community_events.api.v1.contact import router as contact_router
from community_events.api.v1.events import router as events_router
from community_events.api.v1.me import router as me_router

router = APIRouter()
router.include_router(events_router)
router.include_router(contact_router)
router.include_router(me_router)
router.include_router(admin_events_router)
