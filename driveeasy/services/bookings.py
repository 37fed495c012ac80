"""
Booking lifecycle: create, list, cancel, complete.

Policy: one rental at a time per car. Creating a booking claims the car
(``available`` true -> false) with a conditional UPDATE in the same
transaction as the booking insert; cancelling or completing it releases the
car again. No date-range calendar is kept.

SQLite cannot run two racing conditional writers without lock errors, so
when ``serialize_writes`` is set, writes touching the same car are also
queued behind a per-car ``asyncio.Lock``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from driveeasy.core.errors import (
    AuthorizationError,
    BookingNotFound,
    BookingStateConflict,
    CarNotFound,
    CarUnavailable,
    ValidationError,
)
from driveeasy.core.result import Err, Ok, Result
from driveeasy.core.security import UserIdentity
from driveeasy.db.stores import BookingStore, CarStore
from driveeasy.models.booking import Booking, BookingStatus

logger = logging.getLogger(__name__)


class BookingService:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        max_rental_days: int = 30,
        serialize_writes: bool = False,
    ) -> None:
        self._session_factory = session_factory
        self._max_rental_days = max_rental_days
        self._serialize_writes = serialize_writes
        self._car_locks: dict[int, asyncio.Lock] = {}
        self._lock_users: dict[int, int] = {}

    @asynccontextmanager
    async def _car_write(self, car_id: int) -> AsyncIterator[None]:
        if not self._serialize_writes:
            yield
            return
        lock = self._car_locks.get(car_id)
        if lock is None:
            lock = self._car_locks[car_id] = asyncio.Lock()
        self._lock_users[car_id] = self._lock_users.get(car_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            # Drop the lock once nobody holds or waits for it
            self._lock_users[car_id] -= 1
            if not self._lock_users[car_id]:
                del self._lock_users[car_id]
                del self._car_locks[car_id]

    def _check_dates(self, start_date: date, end_date: date) -> ValidationError | None:
        if end_date <= start_date:
            return ValidationError("End date must be after start date")
        if start_date < datetime.now(timezone.utc).date():
            return ValidationError("Start date cannot be in the past")
        if (end_date - start_date).days > self._max_rental_days:
            return ValidationError(f"Bookings are limited to {self._max_rental_days} days")
        return None

    # ── Create ──────────────────────────────────────────────────────
    async def create_booking(
        self,
        identity: UserIdentity,
        car_id: int,
        start_date: date,
        end_date: date,
        pickup_location: str | None = None,
        dropoff_location: str | None = None,
        notes: str | None = None,
    ) -> Result[Booking]:
        invalid = self._check_dates(start_date, end_date)
        if invalid is not None:
            return Err(invalid)

        async with self._car_write(car_id):
            async with self._session_factory() as session:
                async with session.begin():
                    cars = CarStore(session)
                    if not await cars.claim(car_id):
                        car = await cars.get(car_id)
                        return Err(CarNotFound() if car is None else CarUnavailable())

                    car = await cars.get(car_id)
                    total_days = (end_date - start_date).days
                    booking = Booking(
                        user_id=identity.user_id,
                        car_id=car_id,
                        car=car,
                        start_date=start_date,
                        end_date=end_date,
                        total_days=total_days,
                        total_price=round(total_days * car.price_per_day, 2),
                        status=BookingStatus.CONFIRMED,
                        pickup_location=pickup_location,
                        dropoff_location=dropoff_location,
                        notes=notes,
                    )
                    BookingStore(session).add(booking)
                    await session.flush()

        logger.info(
            "Booking %d created: user %d, car %d, %s..%s",
            booking.id, identity.user_id, car_id, start_date, end_date,
        )
        return Ok(booking)

    # ── Read ────────────────────────────────────────────────────────
    async def list_my_bookings(self, identity: UserIdentity) -> Result[list[Booking]]:
        async with self._session_factory() as session:
            return Ok(await BookingStore(session).list_for_user(identity.user_id))

    async def list_all_bookings(
        self, status: str | None = None, skip: int = 0, limit: int = 50
    ) -> Result[list[Booking]]:
        if status is not None and status not in BookingStatus.ALL:
            return Err(ValidationError(f"Status must be one of: {', '.join(BookingStatus.ALL)}"))
        async with self._session_factory() as session:
            return Ok(await BookingStore(session).list_all(status=status, skip=skip, limit=limit))

    async def get_booking(self, identity: UserIdentity, booking_id: int) -> Result[Booking]:
        async with self._session_factory() as session:
            booking = await BookingStore(session).get(booking_id)
        # Other users' bookings are reported as missing, not forbidden
        if booking is None or not (identity.is_admin or booking.user_id == identity.user_id):
            return Err(BookingNotFound())
        return Ok(booking)

    # ── Transitions ─────────────────────────────────────────────────
    async def cancel_booking(self, identity: UserIdentity, booking_id: int) -> Result[Booking]:
        return await self._finish(identity, booking_id, BookingStatus.CANCELLED)

    async def complete_booking(self, identity: UserIdentity, booking_id: int) -> Result[Booking]:
        if not identity.is_admin:
            return Err(AuthorizationError())
        return await self._finish(identity, booking_id, BookingStatus.COMPLETED)

    async def _car_of(self, booking_id: int) -> int | None:
        async with self._session_factory() as session:
            result = await session.execute(select(Booking.car_id).where(Booking.id == booking_id))
            return result.scalar_one_or_none()

    async def _finish(self, identity: UserIdentity, booking_id: int, new_status: str) -> Result[Booking]:
        """Move a confirmed booking to ``new_status`` and release its car atomically."""
        car_id = await self._car_of(booking_id)
        if car_id is None:
            return Err(BookingNotFound())

        async with self._car_write(car_id):
            async with self._session_factory() as session:
                async with session.begin():
                    booking = await BookingStore(session).get(booking_id)
                    if booking is None or not (
                        identity.is_admin or booking.user_id == identity.user_id
                    ):
                        return Err(BookingNotFound())
                    if booking.status != BookingStatus.CONFIRMED:
                        return Err(BookingStateConflict(f"Booking is already {booking.status}"))

                    booking.status = new_status
                    await CarStore(session).release(booking.car_id)

        logger.info("Booking %d %s by user %d", booking_id, new_status, identity.user_id)
        return Ok(booking)
