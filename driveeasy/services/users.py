"""User profile lookups and updates."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from driveeasy.core.errors import UserNotFound
from driveeasy.core.result import Err, Ok, Result
from driveeasy.core.security import UserIdentity, get_password_hash
from driveeasy.db.stores import UserStore
from driveeasy.models.user import User
from driveeasy.schemas.user import ProfileUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def get_user(self, user_id: int) -> Result[User]:
        async with self._session_factory() as session:
            user = await UserStore(session).get(user_id)
        if user is None:
            return Err(UserNotFound())
        return Ok(user)

    async def list_users(self, skip: int = 0, limit: int = 50) -> Result[list[User]]:
        async with self._session_factory() as session:
            return Ok(await UserStore(session).list_all(skip=skip, limit=limit))

    async def update_profile(self, identity: UserIdentity, changes: ProfileUpdate) -> Result[User]:
        """Apply profile changes. Email and role are not self-editable."""
        async with self._session_factory() as session:
            user = await UserStore(session).get(identity.user_id)
            if user is None:
                return Err(UserNotFound())

            fields = changes.model_dump(exclude_unset=True, exclude_none=True)
            password = fields.pop("password", None)
            for field, value in fields.items():
                setattr(user, field, value)
            if password is not None:
                user.hashed_password = get_password_hash(password)

            await session.commit()

        logger.info(
            "User %d updated profile fields %s%s",
            user.id, sorted(fields), " and password" if password else "",
        )
        return Ok(user)
