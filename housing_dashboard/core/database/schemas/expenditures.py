"""
Schema models for HAP expenditure API requests and responses.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from ..entities.expenditures import ExpenditureType
from .base import CamelModel


class HAPExpenditureBase(CamelModel):
    """Base fields for HAP expenditure schema."""

    expenditure_date: date = Field(description="Date of the expenditure")
    expenditure_type: ExpenditureType = Field(description="Expenditure category")
    amount: float = Field(ge=0, description="Amount spent")
    description: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = None


class HAPExpenditureRead(HAPExpenditureBase):
    """Schema for reading a HAP expenditure."""

    id: str
    created_at: datetime
    updated_at: datetime


class HAPExpenditureCreate(HAPExpenditureBase):
    """Schema for creating a HAP expenditure."""

    pass


class HAPExpenditureUpdate(CamelModel):
    """Schema for updating a HAP expenditure."""

    expenditure_date: Optional[date] = None
    expenditure_type: Optional[ExpenditureType] = None
    amount: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = None


class ExpenditureTypeTotal(CamelModel):
    type: str
    total: float


class MonthlyExpenditureTotal(CamelModel):
    month: str = Field(description="Month as YYYY-MM")
    type: str
    total: float
