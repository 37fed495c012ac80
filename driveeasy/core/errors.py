"""
Typed domain errors.

Every error carries the HTTP status it maps to and a message that is safe
to show to clients. Services hand them back inside ``Err`` results; the
exception handlers in ``driveeasy.core.exceptions`` render them.
"""

from __future__ import annotations


class AppError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__


# ── 400 ─────────────────────────────────────────────────────────────
class ValidationError(AppError):
    status_code = 400
    message = "Invalid input"


# ── 401 ─────────────────────────────────────────────────────────────
class AuthenticationError(AppError):
    status_code = 401
    message = "Not authorized"


class InvalidCredentials(AuthenticationError):
    message = "Invalid email or password"


class InvalidToken(AuthenticationError):
    message = "Invalid token"


class ExpiredToken(AuthenticationError):
    message = "Token has expired"


# ── 403 ─────────────────────────────────────────────────────────────
class AuthorizationError(AppError):
    status_code = 403
    message = "Admin privileges required"


# ── 404 ─────────────────────────────────────────────────────────────
class NotFoundError(AppError):
    status_code = 404
    message = "Resource not found"


class CarNotFound(NotFoundError):
    message = "Car not found"


class BookingNotFound(NotFoundError):
    message = "Booking not found"


class UserNotFound(NotFoundError):
    message = "User not found"


# ── 409 ─────────────────────────────────────────────────────────────
class ConflictError(AppError):
    status_code = 409
    message = "Conflict"


class DuplicateEmail(ConflictError):
    message = "Email already registered"


class DuplicateRegistration(ConflictError):
    message = "Registration number already in use"


class CarUnavailable(ConflictError):
    message = "Car is not available for booking"


class CarInUse(ConflictError):
    message = "Car has bookings and cannot be deleted"


class CarOnRent(ConflictError):
    message = "Car has an active booking"


class BookingStateConflict(ConflictError):
    message = "Booking cannot be changed in its current state"


# ── 500 ─────────────────────────────────────────────────────────────
class InternalError(AppError):
    status_code = 500
