from __future__ import annotations

from functools import lru_cache

from community_events.gateway.base import PersistenceGateway
from community_events.gateway.sql import SqlAlchemyGateway


def create_gateway() -> PersistenceGateway:
    from community_events.db import SessionLocal

    return SqlAlchemyGateway(SessionLocal)


@lru_cache(maxsize=1)
def get_gateway() -> PersistenceGateway:
    return create_gateway()
