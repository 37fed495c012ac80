"""
Record stores: the only code that builds SQL.

Each store wraps an ``AsyncSession`` owned by the caller; stores never
commit, so a service can compose several of them inside one transaction.
"""

from __future__ import annotations

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from driveeasy.models.booking import Booking, BookingStatus
from driveeasy.models.car import Car
from driveeasy.models.user import User
from driveeasy.schemas.car import CarFilter


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", r"\%").replace("_", r"\_")


class UserStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, user_id: int) -> User | None:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_all(self, skip: int = 0, limit: int = 50) -> list[User]:
        result = await self.session.execute(
            select(User).order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    def add(self, user: User) -> None:
        self.session.add(user)


class CarStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, car_id: int) -> Car | None:
        return await self.session.get(Car, car_id, populate_existing=True)

    async def get_by_registration(self, registration_number: str) -> Car | None:
        result = await self.session.execute(
            select(Car).where(Car.registration_number == registration_number)
        )
        return result.scalar_one_or_none()

    async def search(self, flt: CarFilter) -> list[Car]:
        query = select(Car)
        if flt.type:
            query = query.where(func.lower(Car.type) == flt.type.strip().lower())
        if flt.fuel_type:
            query = query.where(func.lower(Car.fuel_type) == flt.fuel_type.strip().lower())
        if flt.transmission:
            query = query.where(func.lower(Car.transmission) == flt.transmission.strip().lower())
        if flt.min_price is not None:
            query = query.where(Car.price_per_day >= flt.min_price)
        if flt.max_price is not None:
            query = query.where(Car.price_per_day <= flt.max_price)
        if flt.min_seats is not None:
            query = query.where(Car.seating_capacity >= flt.min_seats)
        if flt.available is not None:
            query = query.where(Car.available.is_(flt.available))
        if flt.search:
            pattern = f"%{_escape_like(flt.search.strip())}%"
            query = query.where(
                Car.make.ilike(pattern, escape="\\") | Car.model.ilike(pattern, escape="\\")
            )
        query = (
            query.order_by(Car.created_at.desc(), Car.id.desc())
            .offset(flt.skip)
            .limit(flt.limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def claim(self, car_id: int) -> bool:
        """Flip ``available`` true -> false; True only for the caller that flipped it."""
        result = await self.session.execute(
            update(Car)
            .where(Car.id == car_id, Car.available.is_(True))
            .values(available=False)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def _still_rented(self, car_id: int):
        return (
            select(Booking.id)
            .where(Booking.car_id == car_id, Booking.status == BookingStatus.CONFIRMED)
            .exists()
        )

    async def set_availability(self, car_id: int, available: bool) -> bool:
        """Set ``available`` unless a confirmed booking still holds the car."""
        result = await self.session.execute(
            update(Car)
            .where(Car.id == car_id, ~self._still_rented(car_id))
            .values(available=available)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def release(self, car_id: int) -> bool:
        # Pending status changes must reach the database before the check
        await self.session.flush()
        return await self.set_availability(car_id, True)

    async def has_bookings(self, car_id: int) -> bool:
        result = await self.session.execute(
            select(func.count(Booking.id)).where(Booking.car_id == car_id)
        )
        return (result.scalar() or 0) > 0

    def add(self, car: Car) -> None:
        self.session.add(car)

    async def delete(self, car: Car) -> None:
        await self.session.delete(car)


class BookingStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, booking_id: int) -> Booking | None:
        result = await self.session.execute(
            select(Booking)
            .options(selectinload(Booking.car))
            .where(Booking.id == booking_id)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: int) -> list[Booking]:
        result = await self.session.execute(
            select(Booking)
            .options(selectinload(Booking.car))
            .where(Booking.user_id == user_id)
            .order_by(Booking.created_at.desc(), Booking.id.desc())
        )
        return list(result.scalars().all())

    async def list_all(
        self, status: str | None = None, skip: int = 0, limit: int = 50
    ) -> list[Booking]:
        query = select(Booking).options(selectinload(Booking.car))
        if status:
            query = query.where(Booking.status == status)
        result = await self.session.execute(
            query.order_by(Booking.created_at.desc(), Booking.id.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    def add(self, booking: Booking) -> None:
        self.session.add(booking)
