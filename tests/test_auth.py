"""Tests for register / login / me endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from driveeasy.core.errors import DuplicateEmail
from driveeasy.core.result import Err, Ok
from driveeasy.db.stores import UserStore
from driveeasy.models.user import User
from driveeasy.schemas.user import UserRegister
from driveeasy.services.registry import Services


async def _register(client: AsyncClient, email: str = "a@x.com", password: str = "secret1", **extra):
    body = {"name": "Ada Renter", "email": email, "password": password, **extra}
    return await client.post("/api/auth/register", json=body)


@pytest.mark.asyncio
async def test_register_returns_user_and_token(async_client: AsyncClient):
    """POST /auth/register should create the account and sign it in."""
    resp = await _register(async_client, phone="+1 555 0100", license_number="D1234567")
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    user = body["data"]["user"]
    assert user["email"] == "a@x.com"
    assert user["role"] == "user"
    assert user["license_number"] == "D1234567"
    assert "password" not in user
    assert "hashed_password" not in user
    assert body["data"]["token"]


@pytest.mark.asyncio
async def test_register_stores_only_a_hash(async_client: AsyncClient, db_session: AsyncSession):
    await _register(async_client)
    result = await db_session.execute(select(User).where(User.email == "a@x.com"))
    user = result.scalar_one()
    assert user.hashed_password != "secret1"
    assert user.hashed_password.startswith("$2")


@pytest.mark.asyncio
async def test_register_duplicate_email_rejected(async_client: AsyncClient, db_session: AsyncSession):
    """Second registration with the same email fails and leaves one record."""
    first = await _register(async_client)
    second = await _register(async_client, email="  A@X.com ")
    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json() == {"success": False, "message": "Email already registered"}

    count = await db_session.execute(select(func.count(User.id)).where(User.email == "a@x.com"))
    assert count.scalar() == 1


@pytest.mark.asyncio
async def test_register_race_on_unique_email(services: Services, db_session: AsyncSession, monkeypatch):
    """A racer that passes the lookup still loses on the unique index, as a 409."""
    profile = UserRegister(name="Ada Renter", email="race@x.com", password="secret1")
    assert isinstance(await services.auth.register(profile), Ok)

    async def lookup_misses(self, email):
        return None

    monkeypatch.setattr(UserStore, "get_by_email", lookup_misses)
    result = await services.auth.register(profile)

    assert isinstance(result, Err)
    assert isinstance(result.error, DuplicateEmail)
    count = await db_session.execute(select(func.count(User.id)).where(User.email == "race@x.com"))
    assert count.scalar() == 1


@pytest.mark.asyncio
async def test_register_validation(async_client: AsyncClient):
    resp = await _register(async_client, email="not-an-email")
    assert resp.status_code == 422
    assert resp.json()["success"] is False

    resp = await _register(async_client, password="123")
    assert resp.status_code == 422
    # The submitted password is never echoed back
    assert "123" not in resp.text

    # Six characters is the minimum
    assert (await _register(async_client, email="five@x.com", password="abcde")).status_code == 422
    assert (await _register(async_client, email="six@x.com", password="abcdef")).status_code == 201


@pytest.mark.asyncio
async def test_login_success(async_client: AsyncClient):
    await _register(async_client)
    resp = await async_client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "a@x.com"


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(async_client: AsyncClient):
    """Wrong password and unknown email produce identical responses."""
    await _register(async_client)
    wrong_pw = await async_client.post("/api/auth/login", json={"email": "a@x.com", "password": "nope!!"})
    no_user = await async_client.post("/api/auth/login", json={"email": "ghost@x.com", "password": "secret1"})

    assert wrong_pw.status_code == no_user.status_code == 401
    assert wrong_pw.json() == no_user.json()
    assert wrong_pw.json()["success"] is False


@pytest.mark.asyncio
async def test_register_login_me_end_to_end(async_client: AsyncClient):
    """register -> login -> /me returns the same email and no password."""
    await _register(async_client)
    login = await async_client.post("/api/auth/login", json={"email": "a@x.com", "password": "secret1"})
    token = login.json()["data"]["token"]

    me = await async_client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    user = me.json()["data"]
    assert user["email"] == "a@x.com"
    assert "password" not in user
    assert "hashed_password" not in user


@pytest.mark.asyncio
async def test_me_requires_token(async_client: AsyncClient):
    resp = await async_client.get("/api/auth/me")
    assert resp.status_code == 401
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_me_rejects_garbage_token(async_client: AsyncClient):
    resp = await async_client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.jwt"})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid token"
