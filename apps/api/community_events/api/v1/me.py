from fastapi import APIRouter
from pydantic import BaseModel

from community_events.auth.deps import Session

router = APIRouter(prefix="/me", tags=["me"])


class CapabilitiesOut(BaseModel):
    can_access_admin_panel: bool
    can_author_events: bool
    can_edit_any_event: bool
    can_delete_events: bool


class MeOut(BaseModel):
    authenticated: bool
    user_id: str | None
    roles: list[str]
    capabilities: CapabilitiesOut


@router.get("", response_model=MeOut)
def me(ctx: Session):
    caps = ctx.capabilities
    return MeOut(
        authenticated=ctx.is_authenticated,
        user_id=str(ctx.user_id) if ctx.user_id else None,
        roles=sorted(role.value for role in ctx.roles),
        capabilities=CapabilitiesOut(
            can_access_admin_panel=caps.can_access_admin_panel,
            can_author_events=caps.can_author_events,
            can_edit_any_event=caps.can_edit_any_event,
            can_delete_events=caps.can_delete_events,
        ),
    )
