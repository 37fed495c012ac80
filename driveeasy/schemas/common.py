"""Response envelope shared by every endpoint."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str | None = None
    data: T | None = None


class HealthData(BaseModel):
    timestamp: str
    environment: str
    database: bool


class ApiInfo(BaseModel):
    name: str
    version: str
    docs: str
