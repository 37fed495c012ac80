"""
Per-client-IP request limit, shared by every route.

slowapi's stock middleware only limits requests it can match to a
top-level endpoint, and routers mounted with ``include_router`` are nested
on current FastAPI releases. This middleware checks the limiter's
application-wide limits for every request instead.
"""

from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware, sync_check_limits
from slowapi.util import get_remote_address
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from driveeasy.core.config import Settings


def build_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        application_limits=[settings.RATE_LIMIT],
        enabled=settings.RATE_LIMIT_ENABLED,
    )


class ClientRateLimitMiddleware(SlowAPIMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        limiter: Limiter = request.app.state.limiter
        if not limiter.enabled:
            return await call_next(request)

        # Renders through the app's RateLimitExceeded handler
        error_response, _ = sync_check_limits(limiter, request, None, request.app)
        if error_response is not None:
            return error_response
        return await call_next(request)
