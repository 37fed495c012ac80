"""
Booking model: one renter, one car, one date range.

A booking references its user and car; it owns neither.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from driveeasy.db.base import Base


class BookingStatus:
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    ALL = (CONFIRMED, CANCELLED, COMPLETED)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (Index("ix_booking_user_created", "user_id", "created_at"),)

    id: int = Column(Integer, primary_key=True, index=True)  # type: ignore[assignment]
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)  # type: ignore[assignment]
    car_id: int = Column(Integer, ForeignKey("cars.id"), nullable=False, index=True)  # type: ignore[assignment]
    start_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    end_date: date = Column(Date, nullable=False)  # type: ignore[assignment]
    total_days: int = Column(Integer, nullable=False)  # type: ignore[assignment]
    total_price: float = Column(Float, nullable=False)  # type: ignore[assignment]
    status: str = Column(  # type: ignore[assignment]
        String(20),
        nullable=False,
        default=BookingStatus.CONFIRMED,
        server_default=BookingStatus.CONFIRMED,
    )  # confirmed | cancelled | completed
    pickup_location: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    dropoff_location: str | None = Column(String(200), nullable=True)  # type: ignore[assignment]
    notes: str | None = Column(String(500), nullable=True)  # type: ignore[assignment]
    created_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: datetime = Column(  # type: ignore[assignment]
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    car = relationship("Car", lazy="raise")
