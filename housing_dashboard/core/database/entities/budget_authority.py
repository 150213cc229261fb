"""
Budget authority and MTW reserve entity models.

A budget authority is the funding ceiling of a fiscal year; only one record
is active at a time. MTW reserves are point-in-time snapshots of the Moving
to Work reserve balance.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlalchemy import DateTime, Numeric
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class BudgetAuthorityBase(Base):
    """Base fields for budget authority entity."""

    total_budget_amount: float = Field(sa_type=Numeric(14, 2, asdecimal=False), description="Total budget amount")
    fiscal_year: int = Field(index=True, description="Fiscal year the budget applies to")
    is_active: bool = Field(default=False, description="Whether this is the active budget authority")
    effective_date: date = Field(description="Date the budget authority takes effect")
    expiration_date: Optional[date] = Field(default=None, description="Date the budget authority expires")
    notes: Optional[str] = Field(default=None, max_length=255, description="Free-form notes")


class BudgetAuthority(BudgetAuthorityBase, table=True):
    """Entity for fiscal-year budget authorities.

    Table: budget_authority
    """

    __tablename__ = "budget_authority"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return f"BudgetAuthority(id={self.id}, fiscal_year={self.fiscal_year}, active={self.is_active})"


class MTWReserveBase(Base):
    """Base fields for MTW reserve entity."""

    reserve_amount: float = Field(sa_type=Numeric(14, 2, asdecimal=False), description="Reserve balance")
    as_of_date: date = Field(index=True, description="Date the balance was measured")
    percentage_of_budget_authority: Optional[float] = Field(
        default=None,
        sa_type=Numeric(9, 2, asdecimal=False),
        description="Reserve as a percentage of the active budget authority",
    )
    minimum_reserve_level: Optional[float] = Field(
        default=None, sa_type=Numeric(14, 2, asdecimal=False), description="Minimum reserve to hold"
    )
    notes: Optional[str] = Field(default=None, max_length=255, description="Free-form notes")


class MTWReserve(MTWReserveBase, table=True):
    """Entity for Moving to Work reserve snapshots.

    Table: mtw_reserves
    """

    __tablename__ = "mtw_reserves"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return f"MTWReserve(id={self.id}, amount={self.reserve_amount}, as_of={self.as_of_date})"
