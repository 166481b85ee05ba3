"""Async engine, session factory and the ``get_db`` dependency.

The engine is built on first use so that importing the models (alembic,
scripts) never needs a reachable database.
"""

import re
from collections.abc import AsyncGenerator

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

# POI tags and pictures: JSONB on PostgreSQL, plain JSON on SQLite
JSONColumn = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Declarative base for every Travelin table."""


def transform_database_url_for_asyncpg(url: str) -> str:
    """Rewrite libpq's ``sslmode=`` query option as asyncpg's ``ssl=``."""
    return re.sub(r"sslmode=(\w+)", r"ssl=\1", url)


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        from travelin_api.config import settings

        _engine = create_async_engine(
            transform_database_url_for_asyncpg(settings.database_url), echo=False
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    # Read models are built after commit, so attributes must stay loaded
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(), class_=AsyncSession, expire_on_commit=False
        )
    return _session_factory


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request."""
    async with get_session_factory()() as session:
        yield session
