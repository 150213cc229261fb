"""
HAP expenditure entity models.

Each record is a single Housing Assistance Payment outlay categorized by
expenditure type.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Numeric, Text
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class ExpenditureType(str, Enum):
    """Category of a HAP expenditure."""

    TRADITIONAL_HAP = "traditional_hap"
    PUBLIC_HOUSING = "public_housing"
    CAPITAL_FUND = "capital_fund"
    LOCAL_NON_TRADITIONAL = "local_non_traditional"
    HCV_ADMIN = "hcv_admin"
    OTHER_1 = "other_1"
    OTHER_2 = "other_2"
    OTHER_3 = "other_3"


class HAPExpenditureBase(Base):
    """Base fields for HAP expenditure entity."""

    expenditure_date: date = Field(index=True, description="Date of the expenditure")
    expenditure_type: str = Field(max_length=32, index=True, description="ExpenditureType value")
    amount: float = Field(sa_type=Numeric(14, 2, asdecimal=False), description="Amount spent")
    description: Optional[str] = Field(default=None, max_length=255, description="Short description")
    notes: Optional[str] = Field(default=None, sa_type=Text, description="Free-form notes")


class HAPExpenditure(HAPExpenditureBase, table=True):
    """Entity for Housing Assistance Payment expenditures.

    Table: hap_expenditures
    """

    __tablename__ = "hap_expenditures"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return f"HAPExpenditure(id={self.id}, type={self.expenditure_type}, amount={self.amount})"
