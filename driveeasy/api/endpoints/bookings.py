"""
Booking endpoints: every route requires a bearer token.

Renters see and cancel their own bookings; admins see all and complete them.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from driveeasy.api.deps import get_current_identity, get_services, require_admin
from driveeasy.core.result import unwrap
from driveeasy.core.security import UserIdentity
from driveeasy.schemas.booking import BookingCreate, BookingRead
from driveeasy.schemas.common import ApiResponse
from driveeasy.services.registry import Services

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=ApiResponse[BookingRead], status_code=201)
async def create_booking(
    body: BookingCreate,
    identity: UserIdentity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> ApiResponse:
    booking = unwrap(
        await services.bookings.create_booking(
            identity,
            body.car_id,
            body.start_date,
            body.end_date,
            pickup_location=body.pickup_location,
            dropoff_location=body.dropoff_location,
            notes=body.notes,
        )
    )
    return ApiResponse(message="Booking confirmed", data=BookingRead.model_validate(booking))


@router.get("/mybookings", response_model=ApiResponse[list[BookingRead]])
async def my_bookings(
    identity: UserIdentity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> ApiResponse:
    """Caller's bookings, newest first."""
    bookings = unwrap(await services.bookings.list_my_bookings(identity))
    return ApiResponse(data=[BookingRead.model_validate(b) for b in bookings])


@router.get("", response_model=ApiResponse[list[BookingRead]])
async def list_bookings(
    status: str | None = None,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
    services: Services = Depends(get_services),
    _admin: UserIdentity = Depends(require_admin),
) -> ApiResponse:
    bookings = unwrap(await services.bookings.list_all_bookings(status=status, skip=skip, limit=limit))
    return ApiResponse(data=[BookingRead.model_validate(b) for b in bookings])


@router.get("/{booking_id}", response_model=ApiResponse[BookingRead])
async def get_booking(
    booking_id: int,
    identity: UserIdentity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> ApiResponse:
    booking = unwrap(await services.bookings.get_booking(identity, booking_id))
    return ApiResponse(data=BookingRead.model_validate(booking))


@router.put("/{booking_id}/cancel", response_model=ApiResponse[BookingRead])
async def cancel_booking(
    booking_id: int,
    identity: UserIdentity = Depends(get_current_identity),
    services: Services = Depends(get_services),
) -> ApiResponse:
    booking = unwrap(await services.bookings.cancel_booking(identity, booking_id))
    return ApiResponse(message="Booking cancelled", data=BookingRead.model_validate(booking))


@router.put("/{booking_id}/complete", response_model=ApiResponse[BookingRead])
async def complete_booking(
    booking_id: int,
    admin: UserIdentity = Depends(require_admin),
    services: Services = Depends(get_services),
) -> ApiResponse:
    booking = unwrap(await services.bookings.complete_booking(admin, booking_id))
    return ApiResponse(message="Booking completed", data=BookingRead.model_validate(booking))
