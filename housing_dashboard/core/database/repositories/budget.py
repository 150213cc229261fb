"""
Budget authority and MTW reserve repositories.

Budget authorities follow the single-active rule: activating one record
deactivates every other record.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import update as sa_update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.budget_authority import BudgetAuthority, MTWReserve
from .base import SqlRepository


class BudgetAuthorityRepository(SqlRepository[BudgetAuthority]):
    """Repository for budget authority data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BudgetAuthority)

    async def list_by_fiscal_year_desc(self) -> List[BudgetAuthority]:
        stmt = select(BudgetAuthority).order_by(BudgetAuthority.fiscal_year.desc())
        return await self._all(stmt)

    async def get_active(self) -> Optional[BudgetAuthority]:
        """Get the active budget authority with the highest fiscal year."""
        stmt = (
            select(BudgetAuthority)
            .where(BudgetAuthority.is_active == True)  # noqa: E712
            .order_by(BudgetAuthority.fiscal_year.desc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def deactivate_all(self, except_id: Optional[str] = None) -> None:
        """Mark every budget authority inactive, optionally sparing one record.

        The change is flushed but not committed so that it lands in the same
        transaction as the record being activated.
        """
        stmt = sa_update(BudgetAuthority).where(BudgetAuthority.is_active == True)  # noqa: E712
        if except_id is not None:
            stmt = stmt.where(BudgetAuthority.id != except_id)
        await self.session.execute(stmt.values(is_active=False).execution_options(synchronize_session="fetch"))
        await self.session.flush()


class MTWReserveRepository(SqlRepository[MTWReserve]):
    """Repository for MTW reserve data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, MTWReserve)

    async def list_latest_first(self) -> List[MTWReserve]:
        stmt = select(MTWReserve).order_by(MTWReserve.as_of_date.desc())
        return await self._all(stmt)

    async def get_latest(self) -> Optional[MTWReserve]:
        stmt = select(MTWReserve).order_by(MTWReserve.as_of_date.desc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()
