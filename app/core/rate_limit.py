from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings


def client_key(request: Request) -> str:
    """Rate-limit bucket for a request: the first forwarded hop behind a trusted proxy, else the peer address."""
    if settings.trust_x_forwarded_for:
        forwarded_for = request.headers.get("x-forwarded-for", "").strip()
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(key_func=client_key, enabled=settings.rate_limit_enabled)


def tool_rate_limit():
    """Per-client limit for the endpoints that spend model tokens."""
    if not settings.rate_limit_enabled:
        return lambda func: func
    return limiter.limit(settings.rate_limit)
