"""
Authentication service: registration, login and token verification.

``authenticate`` is pure: it trusts the signed claims and never touches
the database.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from jose import ExpiredSignatureError, JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from driveeasy.core.errors import (
    DuplicateEmail,
    ExpiredToken,
    InvalidCredentials,
    InvalidToken,
)
from driveeasy.core.result import Err, Ok, Result
from driveeasy.core.security import (
    UserIdentity,
    burn_password_check,
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from driveeasy.db.stores import UserStore
from driveeasy.models.user import Role, User
from driveeasy.schemas.user import UserRegister

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginResult:
    user: User
    token: str


class AuthService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def register(self, profile: UserRegister, role: str = Role.USER) -> Result[User]:
        """Create an account; the password is only ever stored as a bcrypt hash."""
        async with self._session_factory() as session:
            users = UserStore(session)
            if await users.get_by_email(profile.email) is not None:
                return Err(DuplicateEmail())

            user = User(
                email=profile.email,
                hashed_password=get_password_hash(profile.password),
                name=profile.name,
                role=role,
                phone=profile.phone,
                license_number=profile.license_number,
                address=profile.address,
            )
            users.add(user)
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.info("Concurrent registration for %s rejected", profile.email)
                return Err(DuplicateEmail())

        logger.info("Registered user %d (%s)", user.id, user.email)
        return Ok(user)

    def issue_token(self, user: User) -> str:
        return create_access_token(user.id, email=user.email, role=user.role)

    async def login(self, email: str, password: str) -> Result[LoginResult]:
        async with self._session_factory() as session:
            user = await UserStore(session).get_by_email(email.strip().lower())

        if user is None:
            burn_password_check(password)
            return Err(InvalidCredentials())
        if not verify_password(password, user.hashed_password):
            return Err(InvalidCredentials())

        logger.info("User %d logged in", user.id)
        return Ok(LoginResult(user=user, token=self.issue_token(user)))

    def authenticate(self, token: str) -> Result[UserIdentity]:
        try:
            payload = decode_access_token(token)
        except ExpiredSignatureError:
            return Err(ExpiredToken())
        except JWTError:
            return Err(InvalidToken())

        if payload.get("type") != "access":
            return Err(InvalidToken())
        try:
            user_id = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            return Err(InvalidToken())
        email = payload.get("email")
        role = payload.get("role")
        if not isinstance(email, str) or role not in (Role.ADMIN, Role.USER):
            return Err(InvalidToken())
        return Ok(UserIdentity(user_id=user_id, email=email, role=role))
