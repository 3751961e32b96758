"""Rate limiting configuration for the ReWeara API.

Uses slowapi. Storage defaults to in-process memory and can point at Redis via
RATE_LIMIT_STORAGE_URI when several workers share limits.
"""

from functools import lru_cache
from typing import Callable

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from libs.common.config import get_settings


def get_client_ip(request: Request) -> str:
    """
    Get client IP from request, handling proxies.

    Checks X-Forwarded-For header first (for proxied requests),
    then falls back to direct connection IP.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        # Take the first IP in the chain (original client)
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def _get_user_or_ip(request: Request) -> str:
    """
    Rate limit by user ID if authenticated, otherwise by IP.
    """
    user = getattr(request.state, "user", None)
    if user is not None:
        return f"user:{user.user_id}"
    return f"ip:{get_client_ip(request)}"


@lru_cache
def get_limiter() -> Limiter:
    """
    Create and return a cached Limiter instance.
    """
    settings = get_settings()

    return Limiter(
        key_func=_get_user_or_ip,
        default_limits=["100/minute"],
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        strategy="fixed-window",
        enabled=settings.RATE_LIMIT_ENABLED,
    )


limiter = get_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """
    Return a JSON 429 with a stable error code and retry hints.
    """
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Too many requests, please try again later.",
            "code": "RATE_LIMIT_EXCEEDED",
        },
        headers={
            "Retry-After": str(getattr(exc, "retry_after", 60)),
            "X-RateLimit-Limit": str(exc.detail) if exc.detail else "unknown",
        },
    )


# Decorator shortcuts for the rate limit tiers
def login_limit(func: Callable) -> Callable:
    """Admin login attempts (10 per 15 minutes)."""
    return limiter.limit("10 per 15 minutes")(func)


def two_factor_limit(func: Callable) -> Callable:
    """2FA setup and verification (20 per 15 minutes)."""
    return limiter.limit("20 per 15 minutes")(func)


def api_limit(func: Callable) -> Callable:
    """Standard rate limit for general API endpoints (100/minute)."""
    return limiter.limit("100/minute")(func)
