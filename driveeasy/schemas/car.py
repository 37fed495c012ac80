"""Pydantic schemas for the car catalog."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from driveeasy.models.car import CAR_TYPES, FUEL_TYPES, TRANSMISSIONS


def _one_of(value: str | None, allowed: tuple[str, ...], label: str) -> str | None:
    if value is None:
        return value
    for option in allowed:
        if option.lower() == value.strip().lower():
            return option
    raise ValueError(f"{label} must be one of: {', '.join(allowed)}")


class _CarChoices(BaseModel):
    @field_validator("type", check_fields=False)
    @classmethod
    def _type(cls, v: str | None) -> str | None:
        return _one_of(v, CAR_TYPES, "Type")

    @field_validator("fuel_type", check_fields=False)
    @classmethod
    def _fuel(cls, v: str | None) -> str | None:
        return _one_of(v, FUEL_TYPES, "Fuel type")

    @field_validator("transmission", check_fields=False)
    @classmethod
    def _transmission(cls, v: str | None) -> str | None:
        return _one_of(v, TRANSMISSIONS, "Transmission")

    @field_validator("registration_number", check_fields=False)
    @classmethod
    def _registration(cls, v: str | None) -> str | None:
        return v.strip().upper() if v is not None else v


class CarCreate(_CarChoices):
    make: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    year: int = Field(ge=1990, le=2100)
    type: str
    fuel_type: str
    transmission: str
    seating_capacity: int = Field(ge=1, le=15)
    price_per_day: float = Field(gt=0)
    available: bool = True
    image: str | None = Field(default=None, max_length=1000)
    features: list[str] = Field(default_factory=list)
    description: str | None = None
    location: str | None = Field(default=None, max_length=200)
    registration_number: str = Field(min_length=1, max_length=20)


class CarUpdate(_CarChoices):
    make: str | None = Field(default=None, min_length=1, max_length=100)
    model: str | None = Field(default=None, min_length=1, max_length=100)
    year: int | None = Field(default=None, ge=1990, le=2100)
    type: str | None = None
    fuel_type: str | None = None
    transmission: str | None = None
    seating_capacity: int | None = Field(default=None, ge=1, le=15)
    price_per_day: float | None = Field(default=None, gt=0)
    available: bool | None = None
    image: str | None = Field(default=None, max_length=1000)
    features: list[str] | None = None
    description: str | None = None
    location: str | None = Field(default=None, max_length=200)
    registration_number: str | None = Field(default=None, min_length=1, max_length=20)


class CarRead(BaseModel):
    id: int
    make: str
    model: str
    year: int
    type: str
    fuel_type: str
    transmission: str
    seating_capacity: int
    price_per_day: float
    available: bool
    image: str | None
    features: list[str]
    description: str | None
    location: str | None
    registration_number: str
    created_at: datetime | None

    model_config = {"from_attributes": True}


class CarSummary(BaseModel):
    id: int
    make: str
    model: str
    year: int
    image: str | None
    price_per_day: float
    registration_number: str

    model_config = {"from_attributes": True}


class CarFilter(BaseModel):
    type: str | None = None
    fuel_type: str | None = None
    transmission: str | None = None
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    min_seats: int | None = Field(default=None, ge=1)
    available: bool | None = None
    search: str | None = None
    skip: int = Field(default=0, ge=0)
    limit: int = Field(default=50, ge=1, le=100)
