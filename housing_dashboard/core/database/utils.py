"""
Engine and session factory helpers.

The dashboard runs on PostgreSQL through asyncpg in deployments and on
SQLite through aiosqlite in tests and local experiments. Connection URLs are
accepted in their plain form (``postgres://``, ``postgresql://``,
``sqlite://``) and rewritten to the async driver here.
"""

from __future__ import annotations

import re

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .base import Base

_POSTGRES_URL = re.compile(r"^postgres(?:ql)?(?:\+[a-z0-9_]+)?://")
_SQLITE_URL = re.compile(r"^sqlite(?:\+pysqlite)?://")


def create_engine(db_url: str) -> AsyncEngine:
    """Build an async engine for ``db_url`` using asyncpg or aiosqlite."""
    url = _POSTGRES_URL.sub("postgresql+asyncpg://", db_url, count=1)
    url = _SQLITE_URL.sub("sqlite+aiosqlite://", url, count=1)
    if url.startswith("sqlite"):
        return create_async_engine(url, connect_args={"check_same_thread": False})
    return create_async_engine(url, pool_pre_ping=True)


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Routers serialize entities after commit
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_all(engine: AsyncEngine) -> None:
    """Create every dashboard table from the ORM metadata.

    Used by tests and by ``init_db`` in development; deployed databases are
    migrated with Alembic.
    """
    from . import entities  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
