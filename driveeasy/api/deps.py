"""
FastAPI dependencies — wired services, auth guards and database session.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from driveeasy.core.errors import AuthenticationError, AuthorizationError
from driveeasy.core.result import unwrap
from driveeasy.core.security import UserIdentity
from driveeasy.services.registry import Services

# auto_error=False so a missing header goes through our own 401 envelope
bearer_scheme = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    return request.app.state.services


# ── Database session ────────────────────────────────────────────────
async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Auth dependencies ───────────────────────────────────────────────
async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    services: Services = Depends(get_services),
) -> UserIdentity:
    """Verify the bearer token from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authorized, no token")

    identity = unwrap(services.auth.authenticate(credentials.credentials))
    request.state.user_id = identity.user_id
    return identity


async def require_admin(
    identity: UserIdentity = Depends(get_current_identity),
) -> UserIdentity:
    """Only allow admin role to proceed."""
    if not identity.is_admin:
        raise AuthorizationError()
    return identity
