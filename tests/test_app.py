"""Tests for the app shell: health, root, unknown routes, error boundary."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from driveeasy.core.config import settings
from driveeasy.main import create_app
from driveeasy.models.user import User


@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    resp = await async_client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Server is running"
    assert body["data"]["database"] is True
    assert body["data"]["timestamp"]


@pytest.mark.asyncio
async def test_root(async_client: AsyncClient):
    resp = await async_client.get("/")
    assert resp.status_code == 200
    assert resp.json()["data"]["version"] == "1.0.0"


@pytest.mark.asyncio
async def test_unknown_route_lists_routes(async_client: AsyncClient):
    resp = await async_client.get("/api/nowhere")
    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Route /api/nowhere not found"
    routes = body["data"]["routes"]
    # One entry from every mounted router, plus the bare root
    for expected in (
        "POST /api/auth/register",
        "POST /api/auth/login",
        "GET /api/auth/me",
        "GET /api/cars",
        "DELETE /api/cars/{car_id}",
        "POST /api/bookings",
        "GET /api/bookings/mybookings",
        "PUT /api/bookings/{booking_id}/complete",
        "PUT /api/users/profile",
        "GET /api/users/{user_id}",
        "GET /api/health",
        "GET /",
    ):
        assert expected in routes
    assert len(routes) == len(set(routes))


@pytest.mark.asyncio
async def test_internal_errors_do_not_leak(app):
    @app.get("/api/explode")
    async def explode():
        raise RuntimeError("password=hunter2 at db.internal:5432")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/api/explode")

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal server error"}
    assert "hunter2" not in resp.text


@pytest.mark.asyncio
async def test_database_errors_are_generic(app, services, monkeypatch):
    async def broken_listing(flt=None):
        raise OperationalError("SELECT secret_column FROM cars", {}, Exception("password=hunter2"))

    monkeypatch.setattr(services.cars, "list_cars", broken_listing)

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/api/cars")

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal database error"}
    assert "hunter2" not in resp.text
    assert "secret_column" not in resp.text


@pytest.mark.asyncio
async def test_rate_limit_uses_envelope(session_factory, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(settings, "RATE_LIMIT", "2/minute")
    limited_app = create_app(session_factory=session_factory)

    transport = ASGITransport(app=limited_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        statuses = [(await client.get(path)).status_code for path in ("/api/health", "/")]
        # The budget is per client, not per route
        blocked = await client.get("/api/cars")

    assert statuses == [200, 200]
    assert blocked.status_code == 429
    assert blocked.json() == {
        "success": False,
        "message": "Too many requests from this IP, please try again later.",
    }


@pytest.mark.asyncio
async def test_security_headers_on_every_response(async_client: AsyncClient):
    for path in ("/api/health", "/api/nowhere"):
        resp = await async_client.get(path)
        assert resp.headers["x-content-type-options"] == "nosniff"
        assert resp.headers["x-frame-options"] == "DENY"
        assert resp.headers["referrer-policy"] == "no-referrer"
        assert resp.headers["cross-origin-resource-policy"] == "same-origin"


@pytest.mark.asyncio
async def test_oversized_body_rejected(async_client: AsyncClient, db_session: AsyncSession, monkeypatch):
    monkeypatch.setattr(settings, "MAX_BODY_BYTES", 256)
    body = {"name": "x" * 400, "email": "big@x.com", "password": "secret1"}

    resp = await async_client.post("/api/auth/register", json=body)

    assert resp.status_code == 413
    assert resp.json() == {"success": False, "message": "Request body too large"}
    assert resp.headers["x-frame-options"] == "DENY"
    count = await db_session.execute(select(func.count(User.id)))
    assert count.scalar() == 0
