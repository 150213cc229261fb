"""
Global database session and engine management.

This module manages the global AsyncEngine and async_sessionmaker instances
that are used throughout the application for database access.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from housing_dashboard.server.core.config import settings

from .utils import create_all, create_engine, create_sessionmaker

logger = logging.getLogger(__name__)

engine = create_engine(settings.database.url)
async_session_maker = create_sessionmaker(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Initialize the database.

    In development and test environments the tables are created directly from
    the ORM metadata. In production Alembic migrations own the schema, so this
    function only logs.
    """
    if settings.environment in ("development", "test"):
        logger.info(f"Creating database tables for environment '{settings.environment}'")
        await create_all(engine)
    else:
        logger.info("Skipping table creation; schema is managed by Alembic migrations")
