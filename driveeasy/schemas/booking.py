"""Pydantic schemas for bookings."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field, model_validator

from driveeasy.schemas.car import CarSummary


class BookingCreate(BaseModel):
    car_id: int = Field(gt=0)
    start_date: date
    end_date: date
    pickup_location: str | None = Field(default=None, max_length=200)
    dropoff_location: str | None = Field(default=None, max_length=200)
    notes: str | None = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def _check_range(self) -> "BookingCreate":
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class BookingRead(BaseModel):
    id: int
    user_id: int
    car_id: int
    start_date: date
    end_date: date
    total_days: int
    total_price: float
    status: str
    pickup_location: str | None
    dropoff_location: str | None
    notes: str | None
    created_at: datetime | None
    car: CarSummary | None = None

    model_config = {"from_attributes": True}
