"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits.
Every LLM-backed route costs a paid provider call, so those
routes carry the stricter ``rate_limit_heavy`` budget.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from chartcoach.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Return a 429 in the shared ``{"error": ...}`` body shape."""
    return JSONResponse(
        status_code=429,
        content={"error": "Rate limit exceeded", "detail": str(exc.detail)},
    )
