"""
Database entity models.

This package contains all database entity models organized by business domain.
Each module represents either a single table or a small group of tables that
belong to the same domain:

Modules:
- budget_authority: Budget authorities and MTW reserve snapshots
- expenditures: HAP expenditures
- commitments: Fund commitments and their lifecycle
- hcv_utilization: Housing Choice Voucher utilization records
- users: Dashboard users
- style_templates: Report writing style samples
"""

from .budget_authority import BudgetAuthority, MTWReserve
from .commitments import Commitment, CommitmentStatus, CommitmentType
from .expenditures import ExpenditureType, HAPExpenditure
from .hcv_utilization import HCVUtilization, VoucherType
from .style_templates import StyleTemplate
from .users import User, UserRole

__all__ = [
    "BudgetAuthority",
    "Commitment",
    "CommitmentStatus",
    "CommitmentType",
    "ExpenditureType",
    "HAPExpenditure",
    "HCVUtilization",
    "MTWReserve",
    "StyleTemplate",
    "User",
    "UserRole",
    "VoucherType",
]
