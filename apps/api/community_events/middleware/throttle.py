from __future__ import annotations

import time
from fnmatch import fnmatchcase

import structlog
from fastapi import Request
from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from community_events.core.config import settings
from community_events.redis_client import get_redis

logger = structlog.get_logger(__name__)


def parse_rate(rate: str) -> tuple[int, int]:
    """
    Parse formats like:
      - "5/minute"
      - "100/hour"
      - "1/second"
    Returns: (limit, window_seconds)
    """
    raw = rate.strip().lower()
    if "/" not in raw:
        raise ValueError(f"Invalid rate format: {rate}")

    limit_str, window_str = raw.split("/", 1)
    limit = int(limit_str)

    window_str = window_str.strip()
    if window_str in {"sec", "second", "seconds"}:
        return limit, 1
    if window_str in {"min", "minute", "minutes"}:
        return limit, 60
    if window_str in {"hour", "hours"}:
        return limit, 3600
    if window_str in {"day", "days"}:
        return limit, 86400

    raise ValueError(f"Invalid rate window: {window_str}")


def is_throttled_path(path: str, patterns: list[str]) -> bool:
    return any(fnmatchcase(path, pattern) for pattern in patterns)


class SubmissionThrottleMiddleware(BaseHTTPMiddleware):
    """Fixed-window throttle for the public submission forms.

    Only POSTs to the configured paths count. Reads and admin traffic pass
    straight through.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if not settings.throttle_enabled or request.method != "POST":
            return await call_next(request)

        path = request.url.path
        if not is_throttled_path(path, settings.throttle_paths):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"

        try:
            limit, window_seconds = parse_rate(settings.throttle_rate)
        except ValueError:
            logger.warning("throttle_rate_invalid", rate=settings.throttle_rate)
            return await call_next(request)

        now = int(time.time())
        bucket = now // window_seconds
        key = f"throttle:{client_ip}:{path}:{window_seconds}:{bucket}"

        try:
            r = get_redis()
            count = r.incr(key)
            if count == 1:
                r.expire(key, window_seconds)
        except RedisError as exc:
            # Redis down: let the submission through
            logger.warning("throttle_unavailable", error=str(exc))
            return await call_next(request)

        reset = (bucket + 1) * window_seconds
        if count > limit:
            logger.info("submission_throttled", path=path, client_ip=client_ip)
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many submissions. Please wait a moment and try again."},
                headers={
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(reset),
                    "Retry-After": str(max(0, reset - now)),
                },
            )

        response = await call_next(request)
        response.headers.setdefault("X-RateLimit-Limit", str(limit))
        response.headers.setdefault("X-RateLimit-Remaining", str(max(0, limit - int(count))))
        response.headers.setdefault("X-RateLimit-Reset", str(reset))
        return response
