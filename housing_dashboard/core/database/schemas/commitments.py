"""
Schema models for commitment API requests and responses.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from ..entities.commitments import CommitmentStatus, CommitmentType
from .base import CamelModel


class CommitmentBase(CamelModel):
    """Base fields for commitment schema."""

    commitment_number: str = Field(max_length=100, description="External commitment number")
    activity_description: str = Field(max_length=255, description="Activity being funded")
    commitment_type: CommitmentType = Field(description="Funding category")
    account_type: Optional[str] = Field(default=None, max_length=100)
    commitment_date: Optional[date] = None
    obligation_date: Optional[date] = None
    status: CommitmentStatus = Field(default=CommitmentStatus.PLANNED, description="Lifecycle status")
    amount_committed: float = Field(ge=0, description="Committed amount")
    amount_obligated: float = Field(default=0, ge=0)
    amount_expended: float = Field(default=0, ge=0)
    projected_full_expenditure_date: Optional[date] = None
    notes: Optional[str] = None


class CommitmentRead(CommitmentBase):
    """Schema for reading a commitment."""

    id: str
    created_at: datetime
    updated_at: datetime


class CommitmentCreate(CommitmentBase):
    """Schema for creating a commitment."""

    pass


class CommitmentUpdate(CamelModel):
    """Schema for updating a commitment."""

    commitment_number: Optional[str] = Field(default=None, max_length=100)
    activity_description: Optional[str] = Field(default=None, max_length=255)
    commitment_type: Optional[CommitmentType] = None
    account_type: Optional[str] = Field(default=None, max_length=100)
    commitment_date: Optional[date] = None
    obligation_date: Optional[date] = None
    status: Optional[CommitmentStatus] = None
    amount_committed: Optional[float] = Field(default=None, ge=0)
    amount_obligated: Optional[float] = Field(default=None, ge=0)
    amount_expended: Optional[float] = Field(default=None, ge=0)
    projected_full_expenditure_date: Optional[date] = None
    notes: Optional[str] = None
