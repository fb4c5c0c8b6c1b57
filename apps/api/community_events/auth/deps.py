from __future__ import annotations

import uuid
from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, Request

from community_events.auth.jwt import verify_access_token
from community_events.core.config import settings
from community_events.gateway import PersistenceGateway, get_gateway
from community_events.notifications import NotificationDispatcher, get_dispatcher
from community_events.services.access import SessionContext, load_roles

logger = structlog.get_logger(__name__)

Gateway = Annotated[PersistenceGateway, Depends(get_gateway)]
Dispatcher = Annotated[NotificationDispatcher, Depends(get_dispatcher)]


def _unauthorized(detail: str = "unauthorized") -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_id_from_token(token: str) -> uuid.UUID:
    # Local dev auth only
    if settings.auth_mode == "dev" and settings.env == "local":
        prefix = settings.dev_auth_prefix
        if not token.startswith(prefix):
            raise _unauthorized(f"invalid dev token (expected prefix {prefix})")
        try:
            return uuid.UUID(token.removeprefix(prefix).strip())
        except ValueError:
            raise _unauthorized("invalid user id in token") from None

    if settings.auth_mode == "jwt":
        try:
            return verify_access_token(token)
        except ValueError as exc:
            raise _unauthorized(str(exc)) from None

    raise _unauthorized("auth not configured")


def get_session_context(request: Request, gateway: Gateway):
    """Resolve the caller for this request.

    No Authorization header means an anonymous visitor, which is fine for the
    public pages. A token that is present but bad is rejected.
    """
    ctx = SessionContext()
    auth = request.headers.get("Authorization", "")
    if auth:
        if not auth.startswith("Bearer "):
            raise _unauthorized("missing bearer token")
        user_id = _user_id_from_token(auth.removeprefix("Bearer ").strip())
        ctx.start(user_id, load_roles(gateway, user_id))
        structlog.contextvars.bind_contextvars(user_id=str(user_id))
    try:
        yield ctx
    finally:
        ctx.clear()


Session = Annotated[SessionContext, Depends(get_session_context)]


def require_session(ctx: Session) -> SessionContext:
    if not ctx.is_authenticated:
        raise _unauthorized("sign in required")
    return ctx


def require_admin_panel(ctx: Annotated[SessionContext, Depends(require_session)]) -> SessionContext:
    if not ctx.capabilities.can_access_admin_panel:
        raise HTTPException(status_code=403, detail="admin panel access required")
    return ctx


SignedIn = Annotated[SessionContext, Depends(require_session)]
AdminPanel = Annotated[SessionContext, Depends(require_admin_panel)]
