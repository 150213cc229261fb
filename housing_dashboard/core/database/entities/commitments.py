"""
Commitment entity models.

A commitment tracks funds planned, committed, obligated and expended for a
single activity.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Numeric, Text
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class CommitmentType(str, Enum):
    """Funding category of a commitment."""

    TRADITIONAL_HAP = "traditional_hap"
    PUBLIC_HOUSING = "public_housing"
    CAPITAL_FUND = "capital_fund"
    LOCAL_NON_TRADITIONAL = "local_non_traditional"
    HCV_ADMIN = "hcv_admin"
    OTHER = "other"


class CommitmentStatus(str, Enum):
    """Lifecycle status of a commitment."""

    PLANNED = "planned"
    COMMITTED = "committed"
    OBLIGATED = "obligated"
    PARTIALLY_EXPENDED = "partially_expended"
    FULLY_EXPENDED = "fully_expended"
    CANCELLED = "cancelled"


class CommitmentBase(Base):
    """Base fields for commitment entity."""

    commitment_number: str = Field(max_length=100, description="External commitment number")
    activity_description: str = Field(max_length=255, description="Activity being funded")
    commitment_type: str = Field(max_length=32, index=True, description="CommitmentType value")
    account_type: Optional[str] = Field(default=None, max_length=100, description="Account type")
    commitment_date: Optional[date] = Field(default=None, index=True, description="Date funds were committed")
    obligation_date: Optional[date] = Field(default=None, description="Date funds were obligated")
    status: str = Field(default=CommitmentStatus.PLANNED.value, max_length=32, index=True)
    amount_committed: float = Field(sa_type=Numeric(14, 2, asdecimal=False), description="Committed amount")
    amount_obligated: float = Field(default=0, sa_type=Numeric(14, 2, asdecimal=False))
    amount_expended: float = Field(default=0, sa_type=Numeric(14, 2, asdecimal=False))
    projected_full_expenditure_date: Optional[date] = Field(default=None)
    notes: Optional[str] = Field(default=None, sa_type=Text, description="Free-form notes")


class Commitment(CommitmentBase, table=True):
    """Entity for fund commitments.

    Table: commitments
    """

    __tablename__ = "commitments"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return f"Commitment(id={self.id}, number={self.commitment_number}, status={self.status})"
