"""
Car model: the rentable fleet.

``available`` is flipped by the booking lifecycle: a confirmed booking holds
the car until it is cancelled or completed.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, String, Text

from driveeasy.db.base import Base

CAR_TYPES = ("Sedan", "SUV", "Hatchback", "Coupe", "Convertible", "Van", "Truck", "Luxury")
FUEL_TYPES = ("Petrol", "Diesel", "Electric", "Hybrid")
TRANSMISSIONS = ("Automatic", "Manual")


class Car(Base):
    __tablename__ = "cars"

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    make: str = Column(String(100), nullable=False, index=True)  # type: ignore[assignment]
    model: str = Column(String(100), nullable=False)  # type: ignore[assignment]
    year: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    type: str = Column(String(30), nullable=False, index=True)  # type: ignore[assignment]
    fuel_type: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    transmission: str = Column(String(20), nullable=False)  # type: ignore[assignment]
    seating_capacity: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    price_per_day: float = Column(Float, nullable=False)  # type: ignore[assignment]
    available: bool = Column(Boolean, nullable=False, default=True, server_default="true")  # type: ignore[assignment]
    image: str | None = Column(String(1000), nullable=True)  # type: ignore[assignment]
    features: list[str] = Column(JSON, nullable=False, default=list)  # type: ignore[assignment]
    description: str | None = Column(Text, nullable=True)  # type: ignore[assignment]
    location: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    registration_number: str = Column(String(20), unique=True, nullable=False)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
