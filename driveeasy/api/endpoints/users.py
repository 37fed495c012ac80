"""User endpoints: own profile for everyone, directory for admins."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from driveeasy.api.deps import get_current_identity, get_services, require_admin
from driveeasy.core.result import unwrap
from driveeasy.core.security import UserIdentity
from driveeasy.schemas.common import ApiResponse
from driveeasy.schemas.user import ProfileUpdate, UserRead
from driveeasy.services.registry import Services

router = APIRouter(prefix="/users", tags=["users"])


@router.put("/profile", response_model=ApiResponse[UserRead])
async def update_profile(
    body: ProfileUpdate,
    identity: UserIdentity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> ApiResponse:
    user = unwrap(await services.users.update_profile(identity, body))
    return ApiResponse(message="Profile updated", data=UserRead.model_validate(user))


@router.get("", response_model=ApiResponse[list[UserRead]])
async def list_users(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    services: Services = Depends(get_services),
    _admin: UserIdentity = Depends(require_admin),
) -> ApiResponse:
    users = unwrap(await services.users.list_users(skip=skip, limit=limit))
    return ApiResponse(data=[UserRead.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=ApiResponse[UserRead])
async def get_user(
    user_id: int,
    services: Services = Depends(get_services),
    _admin: UserIdentity = Depends(require_admin),
) -> ApiResponse:
    user = unwrap(await services.users.get_user(user_id))
    return ApiResponse(data=UserRead.model_validate(user))
