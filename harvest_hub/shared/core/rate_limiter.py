"""
Rate limiting for the public authentication endpoints.
Built on slowapi, keyed by the client's remote address. Each application
gets its own Limiter (and in-memory storage) on app.state, so two apps in
one process never share counters or settings.
"""

import logging

from fastapi import Request
from limits import RateLimitItem, parse
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..config.settings import Settings
from .exceptions import RateLimitError

logger = logging.getLogger(__name__)

AUTH_SCOPE = "auth"


def create_limiter(settings: Settings) -> Limiter:
    """Limiter honoring RATE_LIMIT_ENABLED, for one application."""
    return Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


def parse_auth_limit(settings: Settings) -> RateLimitItem:
    """AUTH_RATE_LIMIT ("10/minute") as a limits item."""
    return parse(settings.AUTH_RATE_LIMIT)


async def enforce_auth_rate_limit(request: Request) -> None:
    """
    Route dependency counting one hit per client and path against the
    app's auth limit.

    Raises:
        RateLimitError: Client exceeded AUTH_RATE_LIMIT (429)
    """
    limiter: Limiter = request.app.state.limiter
    if not limiter.enabled:
        return

    item: RateLimitItem = request.app.state.auth_rate_limit
    client = get_remote_address(request)
    if not limiter.limiter.hit(item, AUTH_SCOPE, request.url.path, client):
        logger.warning(f"Rate limit exceeded for {client} on {request.url.path}")
        raise RateLimitError(limit=str(item))
