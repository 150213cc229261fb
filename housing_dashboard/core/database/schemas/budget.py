"""
Schema models for budget authority, MTW reserve and budget dashboard API
requests and responses.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from .base import CamelModel

# Upper bound of the NUMERIC(9, 2) reserve percentage column
MAX_RESERVE_PERCENTAGE = 9_999_999.99


class BudgetAuthorityBase(CamelModel):
    """Base fields for budget authority schema."""

    total_budget_amount: float = Field(ge=0, description="Total budget amount")
    fiscal_year: int = Field(ge=2000, le=2100, description="Fiscal year")
    is_active: bool = Field(default=False, description="Whether this budget authority is active")
    effective_date: date = Field(description="Date the budget authority takes effect")
    expiration_date: Optional[date] = Field(default=None, description="Date the budget authority expires")
    notes: Optional[str] = Field(default=None, max_length=255, description="Free-form notes")


class BudgetAuthorityRead(BudgetAuthorityBase):
    """Schema for reading a budget authority."""

    id: str
    created_at: datetime
    updated_at: datetime


class BudgetAuthorityCreate(BudgetAuthorityBase):
    """Schema for creating a budget authority."""

    pass


class BudgetAuthorityUpdate(CamelModel):
    """Schema for updating a budget authority."""

    total_budget_amount: Optional[float] = Field(default=None, ge=0)
    fiscal_year: Optional[int] = Field(default=None, ge=2000, le=2100)
    is_active: Optional[bool] = None
    effective_date: Optional[date] = None
    expiration_date: Optional[date] = None
    notes: Optional[str] = Field(default=None, max_length=255)


class MTWReserveBase(CamelModel):
    """Base fields for MTW reserve schema."""

    reserve_amount: float = Field(ge=0, description="Reserve balance")
    as_of_date: date = Field(description="Date the balance was measured")
    percentage_of_budget_authority: Optional[float] = Field(
        default=None,
        ge=0,
        le=MAX_RESERVE_PERCENTAGE,
        description="Reserve as a percentage of the active budget authority"
    )
    minimum_reserve_level: Optional[float] = Field(default=None, ge=0, description="Minimum reserve to hold")
    notes: Optional[str] = Field(default=None, description="Free-form notes")


class MTWReserveRead(MTWReserveBase):
    """Schema for reading an MTW reserve."""

    id: str
    created_at: datetime
    updated_at: datetime


class MTWReserveCreate(MTWReserveBase):
    """Schema for creating an MTW reserve."""

    pass


class MTWReserveUpdate(CamelModel):
    """Schema for updating an MTW reserve."""

    reserve_amount: Optional[float] = Field(default=None, ge=0)
    as_of_date: Optional[date] = None
    percentage_of_budget_authority: Optional[float] = Field(default=None, ge=0, le=MAX_RESERVE_PERCENTAGE)
    minimum_reserve_level: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None


class DashboardBudgetAuthority(CamelModel):
    id: str
    total_budget_amount: float
    fiscal_year: int
    effective_date: date
    expiration_date: Optional[date] = None


class DashboardReserve(CamelModel):
    id: str
    amount: float
    as_of_date: date
    percentage: str


class CommitmentTotals(CamelModel):
    """Aggregate commitment amounts."""

    total: float = 0
    obligated: float = 0
    expended: float = 0
    pending: float = 0


class BudgetDashboardSummary(CamelModel):
    """Schema for the budget dashboard summary."""

    budget_authority: DashboardBudgetAuthority
    mtw_reserve: Optional[DashboardReserve] = None
    ytd_expenditures: float
    commitments: CommitmentTotals
    available_budget: float
