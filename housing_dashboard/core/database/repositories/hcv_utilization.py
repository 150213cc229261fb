"""
HCV utilization repository.

Besides CRUD this repository produces the aggregates behind the utilization
dashboard, the trend endpoint and the report generator.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.hcv_utilization import HCVUtilization
from .base import QueryBuilder, SqlRepository, as_float, format_month


class HCVUtilizationRepository(SqlRepository[HCVUtilization]):
    """Repository for HCV utilization data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, HCVUtilization)

    async def list_latest_first(self) -> List[HCVUtilization]:
        stmt = select(HCVUtilization).order_by(HCVUtilization.reporting_date.desc())
        return await self._all(stmt)

    async def list_by_type(self, voucher_type: str) -> List[HCVUtilization]:
        stmt = (
            select(HCVUtilization)
            .where(HCVUtilization.voucher_type == voucher_type)
            .order_by(HCVUtilization.reporting_date.desc())
        )
        return await self._all(stmt)

    async def list_by_date_range(self, start: date, end: date) -> List[HCVUtilization]:
        stmt = QueryBuilder.apply_date_range(select(HCVUtilization), HCVUtilization.reporting_date, start, end)
        return await self._all(stmt.order_by(HCVUtilization.reporting_date.desc()))

    async def list_for_period(
        self, start: date, end: date, voucher_type: Optional[str] = None
    ) -> List[HCVUtilization]:
        """Records inside ``[start, end]`` in ascending date order, as fed to reports."""
        stmt = QueryBuilder.apply_date_range(select(HCVUtilization), HCVUtilization.reporting_date, start, end)
        if voucher_type:
            stmt = stmt.where(HCVUtilization.voucher_type == voucher_type)
        return await self._all(stmt.order_by(HCVUtilization.reporting_date.asc()))

    async def get_latest(self) -> Optional[HCVUtilization]:
        stmt = select(HCVUtilization).order_by(HCVUtilization.reporting_date.desc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def ytd_totals(self, since: date) -> Dict[str, float]:
        """Year-to-date totals over every record reported on or after ``since``."""
        stmt = select(
            func.sum(HCVUtilization.leased_vouchers),
            func.sum(HCVUtilization.authorized_vouchers),
            func.avg(HCVUtilization.utilization_rate),
            func.sum(HCVUtilization.hap_expenses),
        ).where(HCVUtilization.reporting_date >= since)
        result = await self.session.execute(stmt)
        leased, authorized, avg_rate, hap = result.one()
        return {
            "total_leased_ytd": int(leased or 0),
            "total_authorized_ytd": int(authorized or 0),
            "avg_utilization_rate_ytd": as_float(avg_rate),
            "total_hap_expenses_ytd": as_float(hap),
        }

    async def by_type_since(self, since: date) -> List[Dict]:
        stmt = (
            select(
                HCVUtilization.voucher_type,
                func.avg(HCVUtilization.utilization_rate),
                func.sum(HCVUtilization.leased_vouchers),
                func.sum(HCVUtilization.authorized_vouchers),
            )
            .where(HCVUtilization.reporting_date >= since)
            .group_by(HCVUtilization.voucher_type)
            .order_by(HCVUtilization.voucher_type)
        )
        result = await self.session.execute(stmt)
        return [
            {
                "voucher_type": voucher_type,
                "avg_utilization_rate": as_float(avg_rate),
                "total_leased": int(leased or 0),
                "total_authorized": int(authorized or 0),
            }
            for voucher_type, avg_rate, leased, authorized in result.all()
        ]

    async def monthly_trend(self, year: int) -> List[Dict]:
        """Monthly totals across all voucher types for one calendar year."""
        year_col, month_col = QueryBuilder.year_month(HCVUtilization.reporting_date)
        stmt = (
            select(
                year_col,
                month_col,
                func.sum(HCVUtilization.leased_vouchers),
                func.sum(HCVUtilization.authorized_vouchers),
                func.avg(HCVUtilization.utilization_rate),
                func.sum(HCVUtilization.hap_expenses),
            )
            .where(HCVUtilization.reporting_date >= date(year, 1, 1))
            .where(HCVUtilization.reporting_date <= date(year, 12, 31))
            .group_by(year_col, month_col)
            .order_by(year_col, month_col)
        )
        result = await self.session.execute(stmt)
        return [
            {
                "month": format_month(y, m),
                "total_leased": int(leased or 0),
                "total_authorized": int(authorized or 0),
                "avg_utilization_rate": as_float(avg_rate),
                "total_hap_expenses": as_float(hap),
            }
            for y, m, leased, authorized, avg_rate, hap in result.all()
        ]

    async def trends(self, since: date, until: Optional[date] = None) -> List[Dict]:
        """Monthly totals per voucher type, ordered by month then voucher type."""
        year_col, month_col = QueryBuilder.year_month(HCVUtilization.reporting_date)
        stmt = select(
            year_col,
            month_col,
            HCVUtilization.voucher_type,
            func.sum(HCVUtilization.authorized_vouchers),
            func.sum(HCVUtilization.leased_vouchers),
            func.avg(HCVUtilization.utilization_rate),
            func.sum(HCVUtilization.hap_expenses),
            func.avg(HCVUtilization.average_hap_per_unit),
        )
        stmt = QueryBuilder.apply_date_range(stmt, HCVUtilization.reporting_date, since, until)
        stmt = stmt.group_by(year_col, month_col, HCVUtilization.voucher_type).order_by(
            year_col, month_col, HCVUtilization.voucher_type
        )
        result = await self.session.execute(stmt)
        return [
            {
                "month": format_month(y, m),
                "voucher_type": voucher_type,
                "total_authorized": int(authorized or 0),
                "total_leased": int(leased or 0),
                "avg_utilization_rate": as_float(avg_rate),
                "total_hap_expenses": as_float(hap),
                "avg_hap_per_unit": float(avg_hap) if avg_hap is not None else None,
            }
            for y, m, voucher_type, authorized, leased, avg_rate, hap, avg_hap in result.all()
        ]
