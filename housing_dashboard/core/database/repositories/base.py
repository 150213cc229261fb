"""
Base repository interfaces and utilities.

This module provides the foundational repository patterns used by every
repository in the database layer: an abstract async CRUD interface, a generic
SQL implementation of it, and query-building helpers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import extract
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from ..base import utc_now

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(ABC, Generic[EntityType]):
    """CRUD contract shared by every dashboard table.

    Args:
        session: Async session, usually the one of the current request
        model: SQLModel table class served by the repository
    """

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        self.session = session
        self.model = model

    @abstractmethod
    async def create(self, entity: EntityType) -> EntityType:
        """Insert ``entity`` and return it with its id and timestamps filled in."""

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        """Return the row with this UUID, or None."""

    @abstractmethod
    async def update(self, entity: EntityType) -> EntityType:
        """Save changes made to a loaded entity and bump ``updated_at``."""

    @abstractmethod
    async def delete(self, entity_id: str) -> bool:
        """Delete by UUID; False when nothing matched."""

    @abstractmethod
    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """List rows, optionally paginated and filtered by column equality."""


class SqlRepository(AsyncBaseRepository[EntityType]):
    """Generic SQL implementation of the CRUD interface.

    Concrete repositories inherit the CRUD operations and add the queries of
    their domain.
    """

    async def create(self, entity: EntityType) -> EntityType:
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def create_many(self, entities: List[EntityType]) -> int:
        """Persist several entities in one transaction and return how many were saved."""
        self.session.add_all(entities)
        await self.session.commit()
        return len(entities)

    async def get_by_id(self, entity_id: str) -> Optional[EntityType]:
        stmt = select(self.model).where(self.model.id == str(entity_id))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, entity: EntityType) -> EntityType:
        entity.updated_at = utc_now()
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity_id: str) -> bool:
        entity = await self.get_by_id(entity_id)
        if entity:
            await self.session.delete(entity)
            await self.session.commit()
            return True
        return False

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        stmt = select(self.model)
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def _all(self, stmt) -> List[EntityType]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())


class QueryBuilder:
    """Utility class for building SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Add ``column == value`` clauses; None values and unknown columns are skipped."""
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt

    @staticmethod
    def apply_date_range(stmt, column, start: Optional[date], end: Optional[date]):
        """Restrict a statement to ``start <= column <= end``; open bounds are skipped."""
        if start is not None:
            stmt = stmt.where(column >= start)
        if end is not None:
            stmt = stmt.where(column <= end)
        return stmt

    @staticmethod
    def year_month(column):
        """Year and month expressions of a date column, portable across dialects."""
        return extract("year", column).label("year"), extract("month", column).label("month")


def format_month(year: Any, month: Any) -> str:
    """Render SQL year/month values as ``YYYY-MM``."""
    return f"{int(year):04d}-{int(month):02d}"


def as_float(value: Any) -> float:
    """Convert an aggregate result to float, treating NULL as 0."""
    return float(value) if value is not None else 0.0
