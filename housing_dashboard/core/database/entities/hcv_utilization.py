"""
HCV utilization entity models.

One record per reporting date and voucher type, holding authorized and leased
voucher counts and the HAP spend for the period.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Numeric, Text
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class VoucherType(str, Enum):
    """Housing Choice Voucher program type."""

    TENANT_BASED = "tenant_based"
    PROJECT_BASED = "project_based"
    HOMEOWNERSHIP = "homeownership"
    EMERGENCY_HOUSING = "emergency_housing"
    HUD_VASH = "hud_vash"
    PERMANENT_SUPPORTIVE = "permanent_supportive"
    MAINSTREAM = "mainstream"
    SPECIAL_PURPOSE = "special_purpose"
    MTW_FLEXIBLE = "mtw_flexible"
    OTHER = "other"


class HCVUtilizationBase(Base):
    """Base fields for HCV utilization entity."""

    reporting_date: date = Field(index=True, description="End of the reporting period")
    voucher_type: str = Field(max_length=32, index=True, description="VoucherType value")
    authorized_vouchers: int = Field(description="Vouchers authorized for the period")
    leased_vouchers: int = Field(description="Vouchers leased during the period")
    utilization_rate: float = Field(sa_type=Numeric(5, 2, asdecimal=False), description="Leased / authorized, in %")
    hap_expenses: float = Field(sa_type=Numeric(14, 2, asdecimal=False), description="HAP spend for the period")
    average_hap_per_unit: Optional[float] = Field(default=None, sa_type=Numeric(14, 2, asdecimal=False))
    budget_utilization: Optional[float] = Field(default=None, sa_type=Numeric(5, 2, asdecimal=False))
    notes: Optional[str] = Field(default=None, sa_type=Text, description="Free-form notes")


class HCVUtilization(HCVUtilizationBase, table=True):
    """Entity for Housing Choice Voucher utilization records.

    Table: hcv_utilization
    """

    __tablename__ = "hcv_utilization"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return (
            f"HCVUtilization(id={self.id}, date={self.reporting_date}, "
            f"type={self.voucher_type}, rate={self.utilization_rate})"
        )
