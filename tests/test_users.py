"""Tests for profile and admin user-directory endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_update_own_profile(async_client: AsyncClient, alice_headers):
    resp = await async_client.put(
        "/api/users/profile",
        json={"phone": "+44 20 7946 0000", "address": "1 High Street"},
        headers=alice_headers,
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["phone"] == "+44 20 7946 0000"
    assert data["address"] == "1 High Street"
    assert data["email"] == "alice@example.com"


@pytest.mark.asyncio
async def test_profile_cannot_change_role(async_client: AsyncClient, alice_headers):
    resp = await async_client.put("/api/users/profile", json={"role": "admin"}, headers=alice_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["role"] == "user"


@pytest.mark.asyncio
async def test_password_change_takes_effect(async_client: AsyncClient, alice_headers):
    resp = await async_client.put("/api/users/profile", json={"password": "n3w-secret"}, headers=alice_headers)
    assert resp.status_code == 200

    old = await async_client.post("/api/auth/login", json={"email": "alice@example.com", "password": "password123"})
    new = await async_client.post("/api/auth/login", json={"email": "alice@example.com", "password": "n3w-secret"})
    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_admin_lists_users(async_client: AsyncClient, admin_headers, alice, bob):
    resp = await async_client.get("/api/users", headers=admin_headers)
    assert resp.status_code == 200
    emails = {u["email"] for u in resp.json()["data"]}
    assert {"alice@example.com", "bob@example.com", "admin@example.com"} <= emails
    assert all("hashed_password" not in u for u in resp.json()["data"])


@pytest.mark.asyncio
async def test_admin_gets_user(async_client: AsyncClient, admin_headers, alice):
    resp = await async_client.get(f"/api/users/{alice.id}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["name"] == "Alice"

    assert (await async_client.get("/api/users/9999", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_regular_user_cannot_list_users(async_client: AsyncClient, alice_headers):
    resp = await async_client.get("/api/users", headers=alice_headers)
    assert resp.status_code == 403
    assert resp.json() == {"success": False, "message": "Admin privileges required"}
