"""Car catalog: public browsing plus admin maintenance."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from driveeasy.core.errors import CarInUse, CarNotFound, CarOnRent, DuplicateRegistration
from driveeasy.core.result import Err, Ok, Result
from driveeasy.db.stores import CarStore
from driveeasy.models.car import Car
from driveeasy.schemas.car import CarCreate, CarFilter, CarUpdate

logger = logging.getLogger(__name__)


class CarService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_cars(self, flt: CarFilter | None = None) -> Result[list[Car]]:
        async with self._session_factory() as session:
            return Ok(await CarStore(session).search(flt or CarFilter()))

    async def get_car(self, car_id: int) -> Result[Car]:
        async with self._session_factory() as session:
            car = await CarStore(session).get(car_id)
        if car is None:
            return Err(CarNotFound())
        return Ok(car)

    async def create_car(self, body: CarCreate) -> Result[Car]:
        async with self._session_factory() as session:
            cars = CarStore(session)
            if await cars.get_by_registration(body.registration_number) is not None:
                return Err(DuplicateRegistration())

            car = Car(**body.model_dump())
            cars.add(car)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return Err(DuplicateRegistration())

        logger.info("Created car %d (%s %s, %s)", car.id, car.make, car.model, car.registration_number)
        return Ok(car)

    async def update_car(self, car_id: int, body: CarUpdate) -> Result[Car]:
        changes = body.model_dump(exclude_unset=True, exclude_none=True)
        available = changes.pop("available", None)
        async with self._session_factory() as session:
            cars = CarStore(session)
            car = await cars.get(car_id)
            if car is None:
                return Err(CarNotFound())

            new_reg = changes.get("registration_number")
            if new_reg and new_reg != car.registration_number:
                if await cars.get_by_registration(new_reg) is not None:
                    return Err(DuplicateRegistration())

            # Availability belongs to the booking lifecycle while a rental is confirmed
            if available is not None:
                if not await cars.set_availability(car_id, available):
                    return Err(CarOnRent())
                await session.refresh(car)

            for field, value in changes.items():
                setattr(car, field, value)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                return Err(DuplicateRegistration())

        logger.info("Updated car %d: %s", car_id, sorted(body.model_fields_set))
        return Ok(car)

    async def delete_car(self, car_id: int) -> Result[Car]:
        """Remove a car that no booking has ever referenced."""
        async with self._session_factory() as session:
            cars = CarStore(session)
            car = await cars.get(car_id)
            if car is None:
                return Err(CarNotFound())
            if await cars.has_bookings(car_id):
                return Err(CarInUse())
            await cars.delete(car)
            await session.commit()

        logger.info("Deleted car %d (%s)", car_id, car.registration_number)
        return Ok(car)
