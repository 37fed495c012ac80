"""
Auth endpoints — register, login (JSON body) & current user.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from driveeasy.api.deps import get_current_identity, get_services
from driveeasy.core.result import unwrap
from driveeasy.core.security import UserIdentity
from driveeasy.schemas.common import ApiResponse
from driveeasy.schemas.user import AuthData, UserLogin, UserRead, UserRegister
from driveeasy.services.registry import Services

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=ApiResponse[AuthData], status_code=201)
async def register(
    body: UserRegister,
    services: Services = Depends(get_services),
) -> ApiResponse:
    """Create a renter account and sign it in."""
    user = unwrap(await services.auth.register(body))
    return ApiResponse(
        message="User registered successfully",
        data=AuthData(token=services.auth.issue_token(user), user=UserRead.model_validate(user)),
    )


@router.post("/login", response_model=ApiResponse[AuthData])
async def login(
    body: UserLogin,
    services: Services = Depends(get_services),
) -> ApiResponse:
    """Exchange email + password for a bearer token."""
    result = unwrap(await services.auth.login(body.email, body.password))
    return ApiResponse(
        message="Login successful",
        data=AuthData(token=result.token, user=UserRead.model_validate(result.user)),
    )


@router.get("/me", response_model=ApiResponse[UserRead])
async def read_current_user(
    identity: UserIdentity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> ApiResponse:
    """Return profile of the currently authenticated user."""
    user = unwrap(await services.users.get_user(identity.user_id))
    return ApiResponse(data=UserRead.model_validate(user))
