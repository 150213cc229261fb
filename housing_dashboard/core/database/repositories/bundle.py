"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances sharing
one session, for services that touch several tables.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .budget import BudgetAuthorityRepository, MTWReserveRepository
from .commitments import CommitmentRepository
from .expenditures import HAPExpenditureRepository
from .hcv_utilization import HCVUtilizationRepository
from .style_templates import StyleTemplateRepository
from .users import UserRepository


@dataclass(frozen=True)
class RepositoryBundle:
    """Convenience bundle of all SQL repositories for dependency injection."""

    session: AsyncSession
    budget_authorities: BudgetAuthorityRepository
    reserves: MTWReserveRepository
    expenditures: HAPExpenditureRepository
    commitments: CommitmentRepository
    utilization: HCVUtilizationRepository
    users: UserRepository
    style_templates: StyleTemplateRepository


def build_repositories(*, session: AsyncSession) -> RepositoryBundle:
    """Build a RepositoryBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return RepositoryBundle(
        session=session,
        budget_authorities=BudgetAuthorityRepository(session),
        reserves=MTWReserveRepository(session),
        expenditures=HAPExpenditureRepository(session),
        commitments=CommitmentRepository(session),
        utilization=HCVUtilizationRepository(session),
        users=UserRepository(session),
        style_templates=StyleTemplateRepository(session),
    )
