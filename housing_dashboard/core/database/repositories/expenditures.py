"""
HAP expenditure repository.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.expenditures import HAPExpenditure
from .base import QueryBuilder, SqlRepository, as_float, format_month


class HAPExpenditureRepository(SqlRepository[HAPExpenditure]):
    """Repository for HAP expenditure data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, HAPExpenditure)

    async def list_latest_first(self) -> List[HAPExpenditure]:
        stmt = select(HAPExpenditure).order_by(HAPExpenditure.expenditure_date.desc())
        return await self._all(stmt)

    async def list_by_type(self, expenditure_type: str) -> List[HAPExpenditure]:
        stmt = (
            select(HAPExpenditure)
            .where(HAPExpenditure.expenditure_type == expenditure_type)
            .order_by(HAPExpenditure.expenditure_date.desc())
        )
        return await self._all(stmt)

    async def list_by_date_range(self, start: date, end: date) -> List[HAPExpenditure]:
        stmt = QueryBuilder.apply_date_range(select(HAPExpenditure), HAPExpenditure.expenditure_date, start, end)
        return await self._all(stmt.order_by(HAPExpenditure.expenditure_date.desc()))

    async def sum_since(self, since: date) -> float:
        """Total amount spent on or after ``since``."""
        stmt = select(func.sum(HAPExpenditure.amount)).where(HAPExpenditure.expenditure_date >= since)
        result = await self.session.execute(stmt)
        return as_float(result.scalar())

    async def summary_by_type(self, start: Optional[date] = None, end: Optional[date] = None) -> List[Dict]:
        """Totals per expenditure type, optionally restricted to a date range.

        Returns:
            ``[{"type": ..., "total": ...}]`` ordered by type
        """
        stmt = select(HAPExpenditure.expenditure_type, func.sum(HAPExpenditure.amount).label("total"))
        stmt = QueryBuilder.apply_date_range(stmt, HAPExpenditure.expenditure_date, start, end)
        stmt = stmt.group_by(HAPExpenditure.expenditure_type).order_by(HAPExpenditure.expenditure_type)
        result = await self.session.execute(stmt)
        return [{"type": row[0], "total": as_float(row[1])} for row in result.all()]

    async def monthly_summary(self, year: int) -> List[Dict]:
        """Totals per month and type for one calendar year.

        Returns:
            ``[{"month": "YYYY-MM", "type": ..., "total": ...}]`` ordered by month
        """
        year_col, month_col = QueryBuilder.year_month(HAPExpenditure.expenditure_date)
        stmt = (
            select(year_col, month_col, HAPExpenditure.expenditure_type, func.sum(HAPExpenditure.amount))
            .where(HAPExpenditure.expenditure_date >= date(year, 1, 1))
            .where(HAPExpenditure.expenditure_date <= date(year, 12, 31))
            .group_by(year_col, month_col, HAPExpenditure.expenditure_type)
            .order_by(year_col, month_col, HAPExpenditure.expenditure_type)
        )
        result = await self.session.execute(stmt)
        return [
            {"month": format_month(y, m), "type": expenditure_type, "total": as_float(total)}
            for y, m, expenditure_type, total in result.all()
        ]
