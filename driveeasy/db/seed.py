"""
Startup seed data: the first admin account and, optionally, a demo fleet.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from driveeasy.core.config import Settings
from driveeasy.core.security import get_password_hash
from driveeasy.models.car import Car
from driveeasy.models.user import Role, User

logger = logging.getLogger(__name__)

DEMO_CARS = [
    {
        "make": "Toyota", "model": "Camry", "year": 2022, "type": "Sedan",
        "fuel_type": "Hybrid", "transmission": "Automatic", "seating_capacity": 5,
        "price_per_day": 55.0, "registration_number": "DE-1001",
        "features": ["Bluetooth", "Backup Camera", "Cruise Control"],
        "description": "Comfortable mid-size sedan with excellent fuel economy.",
    },
    {
        "make": "Honda", "model": "CR-V", "year": 2023, "type": "SUV",
        "fuel_type": "Petrol", "transmission": "Automatic", "seating_capacity": 5,
        "price_per_day": 70.0, "registration_number": "DE-1002",
        "features": ["AWD", "Apple CarPlay", "Lane Assist"],
        "description": "Roomy compact SUV for city and weekend trips.",
    },
    {
        "make": "Tesla", "model": "Model 3", "year": 2023, "type": "Luxury",
        "fuel_type": "Electric", "transmission": "Automatic", "seating_capacity": 5,
        "price_per_day": 110.0, "registration_number": "DE-1003",
        "features": ["Autopilot", "Glass Roof", "Supercharging"],
        "description": "All-electric sedan with long range.",
    },
    {
        "make": "Volkswagen", "model": "Golf", "year": 2021, "type": "Hatchback",
        "fuel_type": "Diesel", "transmission": "Manual", "seating_capacity": 5,
        "price_per_day": 40.0, "registration_number": "DE-1004",
        "features": ["Bluetooth", "Parking Sensors"],
        "description": "Nimble hatchback, easy to park.",
    },
]


async def seed_admin(session_factory: async_sessionmaker[AsyncSession], settings: Settings) -> None:
    async with session_factory() as session:
        result = await session.execute(
            select(User).where(User.email == settings.FIRST_ADMIN_EMAIL)
        )
        if result.scalar_one_or_none() is None:
            session.add(
                User(
                    email=settings.FIRST_ADMIN_EMAIL,
                    hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                    name="System Administrator",
                    role=Role.ADMIN,
                )
            )
            await session.commit()
            logger.info(
                "Default admin created: %s (password: <redacted>)",
                settings.FIRST_ADMIN_EMAIL,
            )


async def seed_demo_cars(session_factory: async_sessionmaker[AsyncSession]) -> None:
    async with session_factory() as session:
        count = await session.execute(select(func.count(Car.id)))
        if count.scalar():
            return
        session.add_all(Car(**data) for data in DEMO_CARS)
        await session.commit()
        logger.info("Seeded %d demo cars", len(DEMO_CARS))
