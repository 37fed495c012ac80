"""
Async SQLAlchemy engine & session factory.

PostgreSQL (asyncpg) in production, SQLite (aiosqlite) for local runs and
the test suite. The booking service checks ``is_sqlite`` to decide whether
writes on the same car have to be queued in-process.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from driveeasy.core.config import settings


def is_sqlite(engine: AsyncEngine) -> bool:
    return engine.dialect.name == "sqlite"


def engine_options(url: str) -> dict[str, Any]:
    """Driver-specific engine keyword arguments for ``url``."""
    options: dict[str, Any] = {"echo": False}
    backend = make_url(url).get_backend_name()
    if backend == "postgresql":
        options.update(
            {
                "pool_pre_ping": True,
                "pool_size": 20,
                "max_overflow": 10,
                "pool_recycle": 300,
            }
        )
    elif backend == "sqlite":
        # Requests hop between event-loop tasks; wait on the file lock instead of failing
        options["connect_args"] = {"check_same_thread": False, "timeout": 30}
    return options


def make_engine(url: str, **overrides: Any) -> AsyncEngine:
    return create_async_engine(url, **{**engine_options(url), **overrides})


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


engine = make_engine(settings.DATABASE_URL)

async_session_factory = make_session_factory(engine)
