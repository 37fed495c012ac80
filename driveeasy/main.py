"""
DriveEasy — Application entry point.

This is the **only** file that assembles the app.  All business logic
lives in the `services/`, `db/`, `models/`, and `core/` packages.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from driveeasy.api.api import api_router
from driveeasy.core.config import settings
from driveeasy.core.exceptions import register_exception_handlers
from driveeasy.core.ratelimit import ClientRateLimitMiddleware, build_limiter
from driveeasy.db.base import Base
from driveeasy.db.seed import seed_admin, seed_demo_cars
from driveeasy.db.session import async_session_factory

# Ensure all models are imported so metadata.create_all can see them
from driveeasy.models import booking, car, user  # noqa: F401
from driveeasy.schemas.common import ApiInfo, ApiResponse
from driveeasy.services.registry import build_services

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    session_factory = app.state.session_factory
    engine = session_factory.kw["bind"]

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    await seed_admin(session_factory, settings)
    if settings.SEED_DEMO_CARS:
        await seed_demo_cars(session_factory)

    logger.info("🚗 DriveEasy v%s started (%s)", settings.VERSION, settings.ENVIRONMENT)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Car rental booking API",
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Services are built once and shared by every request
    application.state.session_factory = session_factory or async_session_factory
    application.state.services = build_services(application.state.session_factory, settings)

    # Rate limiting: one budget per client IP across all routes
    application.state.limiter = build_limiter(settings)
    application.add_middleware(ClientRateLimitMiddleware)

    # CORS
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Global exception handlers (prevent stack-trace leakage)
    register_exception_handlers(application)

    # Mount API
    application.include_router(api_router, prefix=settings.API_PREFIX)

    # Security headers and request body cap; registered last, so outermost
    @application.middleware("http")
    async def harden_responses(request: Request, call_next):
        declared = request.headers.get("content-length", "")
        if declared.isdigit() and int(declared) > settings.MAX_BODY_BYTES:
            logger.warning("Rejected %s %s: body of %s bytes", request.method, request.url.path, declared)
            response = JSONResponse(
                status_code=413,
                content={"success": False, "message": "Request body too large"},
            )
        else:
            response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        return response

    @application.get("/", response_model=ApiResponse[ApiInfo], include_in_schema=False)
    async def root() -> ApiResponse:
        return ApiResponse(
            message="Car Rental API is running!",
            data=ApiInfo(name=settings.PROJECT_NAME, version=settings.VERSION, docs="/docs"),
        )

    return application


app = create_app()
