from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import jwt
from jwt import PyJWTError

from community_events.core.config import settings

DEFAULT_TTL_SECONDS = 3600


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(user_id: uuid.UUID, ttl_seconds: int | None = None) -> str:
    """Mint a token shaped like the hosted auth provider's (for tooling and tests)."""
    now = _now()
    exp = now + timedelta(seconds=ttl_seconds or DEFAULT_TTL_SECONDS)
    payload = {
        "sub": str(user_id),
        "role": "authenticated",
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "aud": settings.jwt_audience,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> uuid.UUID:
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"require": ["sub", "exp"]},
        )
    except PyJWTError as exc:
        raise ValueError("invalid access token") from exc

    try:
        return uuid.UUID(claims["sub"])
    except (TypeError, ValueError) as exc:
        raise ValueError("invalid subject in access token") from exc
