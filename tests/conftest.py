"""
Shared test fixtures for the DriveEasy test suite.

Async throughout (aiosqlite + AsyncSession); every test gets a fresh
in-memory database and an app wired to it.
"""

import os
import sys
from datetime import date, timedelta
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = '["*"]'
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key-for-the-driveeasy-suite"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from driveeasy.core.security import UserIdentity, create_access_token, get_password_hash
from driveeasy.db.base import Base
from driveeasy.db.session import make_engine, make_session_factory
from driveeasy.main import create_app
from driveeasy.models.car import Car
from driveeasy.models.user import Role, User
from driveeasy.services.registry import Services


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory database with all tables created."""
    engine = make_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield make_session_factory(engine)

    await engine.dispose()


@pytest.fixture
def app(session_factory):
    return create_app(session_factory=session_factory)


@pytest.fixture
def services(app) -> Services:
    return app.state.services


@pytest.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


# ── Users & tokens ──────────────────────────────────────────────────
async def _make_user(session: AsyncSession, email: str, role: str) -> User:
    user = User(
        email=email,
        hashed_password=get_password_hash("password123"),
        name=email.split("@")[0].title(),
        role=role,
    )
    session.add(user)
    await session.commit()
    return user


def _auth(user: User) -> dict[str, str]:
    token = create_access_token(user.id, email=user.email, role=user.role)
    return {"Authorization": f"Bearer {token}"}


def identity_of(user: User) -> UserIdentity:
    return UserIdentity(user_id=user.id, email=user.email, role=user.role)


@pytest.fixture
async def alice(db_session) -> User:
    return await _make_user(db_session, "alice@example.com", Role.USER)


@pytest.fixture
async def bob(db_session) -> User:
    return await _make_user(db_session, "bob@example.com", Role.USER)


@pytest.fixture
async def admin(db_session) -> User:
    return await _make_user(db_session, "admin@example.com", Role.ADMIN)


@pytest.fixture
def alice_headers(alice) -> dict[str, str]:
    return _auth(alice)


@pytest.fixture
def bob_headers(bob) -> dict[str, str]:
    return _auth(bob)


@pytest.fixture
def admin_headers(admin) -> dict[str, str]:
    return _auth(admin)


# ── Cars ────────────────────────────────────────────────────────────
def car_payload(**overrides) -> dict:
    payload = {
        "make": "Toyota",
        "model": "Corolla",
        "year": 2022,
        "type": "Sedan",
        "fuel_type": "Petrol",
        "transmission": "Automatic",
        "seating_capacity": 5,
        "price_per_day": 45.5,
        "registration_number": "TST-001",
        "features": ["Bluetooth"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
async def car(db_session) -> Car:
    car = Car(**car_payload())
    db_session.add(car)
    await db_session.commit()
    return car


def future_range(start_in: int = 1, days: int = 3) -> tuple[date, date]:
    start = date.today() + timedelta(days=start_in)
    return start, start + timedelta(days=days)
