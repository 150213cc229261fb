"""
Database repository layer using SQLModel.

This package contains all repository classes organized by business domain.
Each module provides type-safe async data access for its entity models.

Modules:
- base: AsyncBaseRepository interface, SqlRepository and QueryBuilder utilities
- budget: Budget authority and MTW reserve repositories
- expenditures: HAP expenditure repository and summaries
- commitments: Commitment repository and totals
- hcv_utilization: HCV utilization repository and aggregates
- users: User repository
- style_templates: Style template repository
- bundle: RepositoryBundle for services
"""

from .budget import BudgetAuthorityRepository, MTWReserveRepository
from .bundle import RepositoryBundle, build_repositories
from .commitments import CommitmentRepository
from .expenditures import HAPExpenditureRepository
from .hcv_utilization import HCVUtilizationRepository
from .style_templates import StyleTemplateRepository
from .users import UserRepository

__all__ = [
    "BudgetAuthorityRepository",
    "CommitmentRepository",
    "HAPExpenditureRepository",
    "HCVUtilizationRepository",
    "MTWReserveRepository",
    "RepositoryBundle",
    "StyleTemplateRepository",
    "UserRepository",
    "build_repositories",
]
