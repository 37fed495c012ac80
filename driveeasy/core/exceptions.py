"""
Global exception handlers — the single error boundary of the API.

Every failure leaves the app as ``{"success": false, "message": ...}``.
Internal exception text and stack traces are logged, never returned.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from driveeasy.core.errors import AppError

logger = logging.getLogger(__name__)

_HTTP_METHODS = {"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"}


def _error_body(message: str, **extra: object) -> dict[str, object]:
    return {"success": False, "message": message, **extra}


def _who(request: Request) -> str:
    user_id = getattr(request.state, "user_id", None)
    return f"user={user_id}" if user_id is not None else "anonymous"


def available_routes(app: FastAPI) -> list[str]:
    """
    List every ``METHOD /path`` the app serves.

    Included routers are read from the OpenAPI paths, which come out flat
    however the router tree is nested. Routes hidden from the schema (such
    as ``/``) are picked up from the top level.
    """
    routes: list[str] = []
    for path, operations in app.openapi().get("paths", {}).items():
        for method in operations:
            if method.upper() in _HTTP_METHODS:
                routes.append(f"{method.upper()} {path}")
    for route in app.routes:
        if isinstance(route, APIRoute):
            for method in sorted(route.methods):
                entry = f"{method} {route.path}"
                if entry not in routes:
                    routes.append(entry)
    return routes


async def _app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s %s -> %d %s (%s)",
            request.method, request.url.path, exc.status_code, exc.code, _who(request),
            exc_info=exc,
        )
    else:
        logger.warning(
            "%s %s -> %d %s (%s)",
            request.method, request.url.path, exc.status_code, exc.code, _who(request),
        )
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.message))


async def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404 and exc.detail == "Not Found":
        return JSONResponse(
            status_code=404,
            content=_error_body(
                f"Route {request.url.path} not found",
                data={"routes": available_routes(request.app)},
            ),
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Drop the echoed input so passwords never come back in error bodies
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.info("%s %s -> 422 validation failed (%s)", request.method, request.url.path, _who(request))
    return JSONResponse(
        status_code=422,
        content=_error_body("Validation failed", errors=errors),
    )


# Sync: SlowAPIMiddleware calls this handler directly without awaiting it
def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit hit on %s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=429,
        content=_error_body("Too many requests from this IP, please try again later."),
    )


async def _integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.error("Database integrity error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=409,
        content=_error_body("Database constraint violation"),
    )


async def _sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal database error"),
    )


async def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s (%s)", request.method, request.url.path, _who(request))
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all exception handlers to the FastAPI app."""
    app.add_exception_handler(AppError, _app_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)  # type: ignore[arg-type]
    app.add_exception_handler(IntegrityError, _integrity_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _generic_exception_handler)
