"""
Car catalog endpoints.

- GET operations are public.
- POST / PUT / DELETE operations require admin role.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from driveeasy.api.deps import get_services, require_admin
from driveeasy.core.result import unwrap
from driveeasy.core.security import UserIdentity
from driveeasy.schemas.car import CarCreate, CarFilter, CarRead, CarUpdate
from driveeasy.schemas.common import ApiResponse
from driveeasy.services.registry import Services

router = APIRouter(prefix="/cars", tags=["cars"])


@router.get("", response_model=ApiResponse[list[CarRead]])
async def list_cars(
    type: str | None = None,
    fuel_type: str | None = None,
    transmission: str | None = None,
    min_price: float | None = Query(default=None, ge=0),
    max_price: float | None = Query(default=None, ge=0),
    min_seats: int | None = Query(default=None, ge=1),
    available: bool | None = None,
    search: str | None = Query(default=None, max_length=100),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
    services: Services = Depends(get_services),
) -> ApiResponse:
    flt = CarFilter(
        type=type,
        fuel_type=fuel_type,
        transmission=transmission,
        min_price=min_price,
        max_price=max_price,
        min_seats=min_seats,
        available=available,
        search=search,
        skip=skip,
        limit=limit,
    )
    cars = unwrap(await services.cars.list_cars(flt))
    return ApiResponse(data=[CarRead.model_validate(c) for c in cars])


@router.get("/{car_id}", response_model=ApiResponse[CarRead])
async def get_car(
    car_id: int,
    services: Services = Depends(get_services),
) -> ApiResponse:
    car = unwrap(await services.cars.get_car(car_id))
    return ApiResponse(data=CarRead.model_validate(car))


@router.post("", response_model=ApiResponse[CarRead], status_code=201)
async def create_car(
    body: CarCreate,
    services: Services = Depends(get_services),
    _admin: UserIdentity = Depends(require_admin),
) -> ApiResponse:
    car = unwrap(await services.cars.create_car(body))
    return ApiResponse(message="Car created", data=CarRead.model_validate(car))


@router.put("/{car_id}", response_model=ApiResponse[CarRead])
async def update_car(
    car_id: int,
    body: CarUpdate,
    services: Services = Depends(get_services),
    _admin: UserIdentity = Depends(require_admin),
) -> ApiResponse:
    car = unwrap(await services.cars.update_car(car_id, body))
    return ApiResponse(message="Car updated", data=CarRead.model_validate(car))


@router.delete("/{car_id}", response_model=ApiResponse[None])
async def delete_car(
    car_id: int,
    services: Services = Depends(get_services),
    _admin: UserIdentity = Depends(require_admin),
) -> ApiResponse:
    car = unwrap(await services.cars.delete_car(car_id))
    return ApiResponse(message=f"Car '{car.make} {car.model}' deleted")
