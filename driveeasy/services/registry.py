"""
Service wiring: every domain service built once, around one session factory.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from driveeasy.core.config import Settings
from driveeasy.db.session import is_sqlite
from driveeasy.services.auth import AuthService
from driveeasy.services.bookings import BookingService
from driveeasy.services.cars import CarService
from driveeasy.services.users import UserService


@dataclass(frozen=True)
class Services:
    auth: AuthService
    users: UserService
    cars: CarService
    bookings: BookingService


def build_services(
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
) -> Services:
    engine = session_factory.kw.get("bind")
    serialize_writes = engine is not None and is_sqlite(engine)
    return Services(
        auth=AuthService(session_factory),
        users=UserService(session_factory),
        cars=CarService(session_factory),
        bookings=BookingService(
            session_factory,
            max_rental_days=settings.MAX_RENTAL_DAYS,
            serialize_writes=serialize_writes,
        ),
    )
