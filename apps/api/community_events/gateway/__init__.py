from __future__ import annotations

from community_events.gateway.base import PersistenceGateway


def create_gateway():
    from community_events.gateway.factory import create_gateway as _create_gateway

    return _create_gateway()


def get_gateway():
    from community_events.gateway.factory import get_gateway as _get_gateway

    return _get_gateway()


__all__ = ["PersistenceGateway", "create_gateway", "get_gateway"]
