"""
API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from driveeasy.api.endpoints import auth, bookings, cars, health, users

api_router = APIRouter()

# Auth (register, login, me)
api_router.include_router(auth.router)

# Catalog and rentals
api_router.include_router(cars.router)
api_router.include_router(bookings.router)

# Profiles and admin user directory
api_router.include_router(users.router)

# Liveness
api_router.include_router(health.router)
