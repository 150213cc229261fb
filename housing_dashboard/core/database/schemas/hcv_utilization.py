"""
Schema models for HCV utilization API requests and responses, including the
utilization dashboard and trend rows.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from ..entities.hcv_utilization import VoucherType
from .base import CamelModel


class HCVUtilizationBase(CamelModel):
    """Base fields for HCV utilization schema."""

    reporting_date: date = Field(description="End of the reporting period")
    voucher_type: VoucherType = Field(description="Voucher program type")
    authorized_vouchers: int = Field(ge=0)
    leased_vouchers: int = Field(ge=0)
    utilization_rate: float = Field(ge=0, description="Leased / authorized, in percent")
    hap_expenses: float = Field(ge=0)
    average_hap_per_unit: Optional[float] = Field(default=None, ge=0)
    budget_utilization: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class HCVUtilizationRead(HCVUtilizationBase):
    """Schema for reading an HCV utilization record."""

    id: str
    created_at: datetime
    updated_at: datetime


class HCVUtilizationCreate(HCVUtilizationBase):
    """Schema for creating an HCV utilization record."""

    pass


class HCVUtilizationUpdate(CamelModel):
    """Schema for updating an HCV utilization record."""

    reporting_date: Optional[date] = None
    voucher_type: Optional[VoucherType] = None
    authorized_vouchers: Optional[int] = Field(default=None, ge=0)
    leased_vouchers: Optional[int] = Field(default=None, ge=0)
    utilization_rate: Optional[float] = Field(default=None, ge=0)
    hap_expenses: Optional[float] = Field(default=None, ge=0)
    average_hap_per_unit: Optional[float] = Field(default=None, ge=0)
    budget_utilization: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class YTDUtilization(CamelModel):
    total_leased_ytd: int = Field(default=0, serialization_alias="totalLeasedYTD")
    total_authorized_ytd: int = Field(default=0, serialization_alias="totalAuthorizedYTD")
    avg_utilization_rate_ytd: float = Field(default=0, serialization_alias="avgUtilizationRateYTD")
    total_hap_expenses_ytd: float = Field(default=0, serialization_alias="totalHapExpensesYTD")


class UtilizationByType(CamelModel):
    voucher_type: str
    avg_utilization_rate: float
    total_leased: int
    total_authorized: int


class MonthlyUtilization(CamelModel):
    month: str
    total_leased: int
    total_authorized: int
    avg_utilization_rate: float
    total_hap_expenses: float


class UtilizationTrend(CamelModel):
    month: str
    voucher_type: str
    total_authorized: int
    total_leased: int
    avg_utilization_rate: float
    total_hap_expenses: float
    avg_hap_per_unit: Optional[float] = None


class HCVDashboard(CamelModel):
    """Schema for the HCV utilization dashboard."""

    latest_utilization: Optional[HCVUtilizationRead] = None
    ytd_utilization: YTDUtilization
    utilization_by_type: List[UtilizationByType]
    monthly_trend: List[MonthlyUtilization]
