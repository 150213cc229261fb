"""
Style template repository.
"""

from __future__ import annotations

from typing import Dict, List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.style_templates import StyleTemplate
from .base import SqlRepository


class StyleTemplateRepository(SqlRepository[StyleTemplate]):
    """Repository for style template data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, StyleTemplate)

    async def list_summaries(self) -> List[Dict]:
        """List templates without loading their content."""
        stmt = select(StyleTemplate.id, StyleTemplate.name, StyleTemplate.created_at).order_by(
            StyleTemplate.created_at.desc()
        )
        result = await self.session.execute(stmt)
        return [{"id": row.id, "name": row.name, "created_at": row.created_at} for row in result.all()]
