from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from community_events.gateway.base import PersistenceGateway
from community_events.models.user_role import AppRole
from community_events.services.exceptions import PersistenceError

logger = structlog.get_logger(__name__)

ADMIN_PANEL_ROLES = frozenset({AppRole.ADMIN, AppRole.EDITOR})
AUTHOR_ROLES = frozenset({AppRole.ADMIN, AppRole.EDITOR, AppRole.AUTHOR})
EDIT_ANY_ROLES = frozenset({AppRole.ADMIN, AppRole.EDITOR})
DELETE_ROLES = frozenset({AppRole.ADMIN})


@dataclass(frozen=True)
class Capabilities:
    can_access_admin_panel: bool = False
    can_author_events: bool = False
    can_edit_any_event: bool = False
    can_delete_events: bool = False


NO_CAPABILITIES = Capabilities()


def parse_roles(values: Iterable[object]) -> frozenset[AppRole]:
    roles = set()
    for value in values:
        try:
            roles.add(AppRole(value))
        except ValueError:
            logger.debug("unknown_role_ignored", role=value)
    return frozenset(roles)


def evaluate_capabilities(roles: Iterable[object]) -> Capabilities:
    held = parse_roles(roles)
    return Capabilities(
        can_access_admin_panel=bool(held & ADMIN_PANEL_ROLES),
        can_author_events=bool(held & AUTHOR_ROLES),
        can_edit_any_event=bool(held & EDIT_ANY_ROLES),
        can_delete_events=bool(held & DELETE_ROLES),
    )


def load_roles(gateway: PersistenceGateway, user_id: uuid.UUID) -> frozenset[AppRole]:
    """Fetch the user's role grants, failing closed to no roles."""
    try:
        rows = gateway.select("user_roles", {"user_id": user_id})
    except PersistenceError as exc:
        logger.warning("role_lookup_failed", user_id=str(user_id), error=exc.message)
        return frozenset()
    return parse_roles(row.get("role") for row in rows)


class SessionContext:
    """Who is acting, and with which roles.

    Populated with ``start`` once the session is known and emptied with
    ``clear`` at sign-out. An empty context is anonymous and has no
    capabilities.
    """

    def __init__(self) -> None:
        self._user_id: uuid.UUID | None = None
        self._roles: frozenset[AppRole] = frozenset()

    @classmethod
    def anonymous(cls) -> SessionContext:
        return cls()

    @classmethod
    def for_user(cls, user_id: uuid.UUID, roles: Iterable[object] = ()) -> SessionContext:
        ctx = cls()
        ctx.start(user_id, roles)
        return ctx

    def start(self, user_id: uuid.UUID, roles: Iterable[object] = ()) -> None:
        self._user_id = user_id
        self._roles = parse_roles(roles)

    def clear(self) -> None:
        self._user_id = None
        self._roles = frozenset()

    @property
    def user_id(self) -> uuid.UUID | None:
        return self._user_id

    @property
    def roles(self) -> frozenset[AppRole]:
        return self._roles

    @property
    def is_authenticated(self) -> bool:
        return self._user_id is not None

    @property
    def capabilities(self) -> Capabilities:
        if not self.is_authenticated:
            return NO_CAPABILITIES
        return evaluate_capabilities(self._roles)
