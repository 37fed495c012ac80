"""Pydantic schemas for registration, login and user profiles."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

MIN_PASSWORD_LENGTH = 6

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _normalise_email(v: str) -> str:
    v = v.strip().lower()
    if not _EMAIL_RE.match(v):
        raise ValueError("Invalid email address")
    return v


def _check_password(v: str) -> str:
    # bcrypt only looks at the first 72 bytes
    if len(v.encode("utf-8")) > 72:
        raise ValueError("Password must be at most 72 bytes")
    return v


class UserRegister(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    phone: str | None = Field(default=None, max_length=30)
    license_number: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=500)

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return _normalise_email(v)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        return _check_password(v)

    @field_validator("name")
    @classmethod
    def _name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name must not be empty")
        return v


class UserLogin(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, v: str) -> str:
        return v.strip().lower()


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: str
    phone: str | None
    license_number: str | None
    address: str | None
    created_at: datetime | None

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    phone: str | None = Field(default=None, max_length=30)
    license_number: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=500)
    password: str | None = Field(default=None, min_length=MIN_PASSWORD_LENGTH)

    @field_validator("password")
    @classmethod
    def _password(cls, v: str | None) -> str | None:
        return _check_password(v) if v is not None else v


class AuthData(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserRead
