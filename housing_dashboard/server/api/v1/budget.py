"""
Budget Endpoints.

This module serves the budget dashboard summary and manages budget
authorities and MTW reserve balances.

Only one budget authority is active at a time: creating or updating a record
with ``isActive=true`` deactivates every other record in the same
transaction.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status

from housing_dashboard.core.database.entities import BudgetAuthority, MTWReserve
from housing_dashboard.core.database.schemas.base import MessageResponse
from housing_dashboard.core.database.schemas.budget import (
    MAX_RESERVE_PERCENTAGE,
    BudgetAuthorityCreate,
    BudgetAuthorityRead,
    BudgetAuthorityUpdate,
    BudgetDashboardSummary,
    CommitmentTotals,
    DashboardBudgetAuthority,
    DashboardReserve,
    MTWReserveCreate,
    MTWReserveRead,
    MTWReserveUpdate,
)
from housing_dashboard.core.logging_config import get_logger
from housing_dashboard.server.services.deps import AdminDep, CurrentUserDep, ReposDep, WriterDep

logger = get_logger(__name__)
router = APIRouter()


def reserve_percentage(reserve_amount: float, total_budget: float) -> float:
    """Reserve balance as a percentage of the budget, rounded to 2 decimals and capped to fit the column."""
    if not total_budget:
        return 0.0
    return min(round(reserve_amount / total_budget * 100, 2), MAX_RESERVE_PERCENTAGE)


@router.get(
    "/dashboard-summary",
    response_model=BudgetDashboardSummary,
    summary="Budget Dashboard Summary",
    description="Active budget authority, latest MTW reserve, year-to-date spending and commitment totals.",
    responses={404: {"description": "No active budget authority found"}},
)
async def dashboard_summary(repos: ReposDep, _: CurrentUserDep) -> BudgetDashboardSummary:
    """
    Budget dashboard summary.

    ``availableBudget`` is the active budget minus everything committed;
    ``ytdExpenditures`` covers expenditures since January 1 of the current year.
    """
    authority = await repos.budget_authorities.get_active()
    if authority is None:
        raise HTTPException(status_code=404, detail="No active budget authority found")

    reserve = await repos.reserves.get_latest()
    ytd = await repos.expenditures.sum_since(date(date.today().year, 1, 1))
    totals = await repos.commitments.totals()
    total_budget = float(authority.total_budget_amount)

    mtw_reserve: Optional[DashboardReserve] = None
    if reserve is not None:
        mtw_reserve = DashboardReserve(
            id=reserve.id,
            amount=float(reserve.reserve_amount),
            as_of_date=reserve.as_of_date,
            percentage=f"{reserve_percentage(float(reserve.reserve_amount), total_budget):.2f}",
        )

    return BudgetDashboardSummary(
        budget_authority=DashboardBudgetAuthority.model_validate(authority),
        mtw_reserve=mtw_reserve,
        ytd_expenditures=ytd,
        commitments=CommitmentTotals(**totals),
        available_budget=total_budget - totals["total"],
    )


# =====================================================================
# Budget authorities
# =====================================================================


async def _get_authority_or_404(repos: ReposDep, authority_id: str) -> BudgetAuthority:
    authority = await repos.budget_authorities.get_by_id(authority_id)
    if authority is None:
        raise HTTPException(status_code=404, detail="Budget authority not found")
    return authority


@router.get("/budget-authorities", response_model=List[BudgetAuthorityRead], summary="List Budget Authorities")
async def list_budget_authorities(repos: ReposDep, _: CurrentUserDep) -> List[BudgetAuthority]:
    return await repos.budget_authorities.list_by_fiscal_year_desc()


@router.get(
    "/budget-authorities/{authority_id}",
    response_model=BudgetAuthorityRead,
    summary="Get Budget Authority",
    responses={404: {"description": "Budget authority not found"}},
)
async def get_budget_authority(authority_id: str, repos: ReposDep, _: CurrentUserDep) -> BudgetAuthority:
    return await _get_authority_or_404(repos, authority_id)


@router.post(
    "/budget-authorities",
    response_model=BudgetAuthorityRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Budget Authority",
)
async def create_budget_authority(
    authority_in: BudgetAuthorityCreate, repos: ReposDep, _: WriterDep
) -> BudgetAuthority:
    if authority_in.is_active:
        await repos.budget_authorities.deactivate_all()
    authority = await repos.budget_authorities.create(BudgetAuthority(**authority_in.model_dump()))
    logger.info(f"Created budget authority {authority.id} for FY{authority.fiscal_year}")
    return authority


@router.put(
    "/budget-authorities/{authority_id}",
    response_model=BudgetAuthorityRead,
    summary="Update Budget Authority",
    responses={404: {"description": "Budget authority not found"}},
)
async def update_budget_authority(
    authority_id: str, authority_in: BudgetAuthorityUpdate, repos: ReposDep, _: WriterDep
) -> BudgetAuthority:
    authority = await _get_authority_or_404(repos, authority_id)
    changes = authority_in.model_dump(exclude_unset=True)
    if changes.get("is_active"):
        await repos.budget_authorities.deactivate_all(except_id=authority.id)
    for field, value in changes.items():
        setattr(authority, field, value)
    return await repos.budget_authorities.update(authority)


@router.delete(
    "/budget-authorities/{authority_id}",
    response_model=MessageResponse,
    summary="Delete Budget Authority",
    responses={404: {"description": "Budget authority not found"}},
)
async def delete_budget_authority(authority_id: str, repos: ReposDep, _: AdminDep) -> MessageResponse:
    if not await repos.budget_authorities.delete(authority_id):
        raise HTTPException(status_code=404, detail="Budget authority not found")
    return MessageResponse(message="Budget authority deleted successfully")


# =====================================================================
# MTW reserves
# =====================================================================


async def _get_reserve_or_404(repos: ReposDep, reserve_id: str) -> MTWReserve:
    reserve = await repos.reserves.get_by_id(reserve_id)
    if reserve is None:
        raise HTTPException(status_code=404, detail="MTW reserve not found")
    return reserve


async def _percentage_of_active_budget(repos: ReposDep, reserve_amount: float) -> Optional[float]:
    authority = await repos.budget_authorities.get_active()
    if authority is None:
        return None
    return reserve_percentage(reserve_amount, float(authority.total_budget_amount))


@router.get("/mtw-reserves", response_model=List[MTWReserveRead], summary="List MTW Reserves")
async def list_mtw_reserves(repos: ReposDep, _: CurrentUserDep) -> List[MTWReserve]:
    return await repos.reserves.list_latest_first()


@router.get(
    "/mtw-reserves/{reserve_id}",
    response_model=MTWReserveRead,
    summary="Get MTW Reserve",
    responses={404: {"description": "MTW reserve not found"}},
)
async def get_mtw_reserve(reserve_id: str, repos: ReposDep, _: CurrentUserDep) -> MTWReserve:
    return await _get_reserve_or_404(repos, reserve_id)


@router.post(
    "/mtw-reserves",
    response_model=MTWReserveRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create MTW Reserve",
    description="Record a reserve balance. The share of the active budget authority is computed when omitted.",
)
async def create_mtw_reserve(reserve_in: MTWReserveCreate, repos: ReposDep, _: WriterDep) -> MTWReserve:
    data = reserve_in.model_dump()
    if data.get("percentage_of_budget_authority") is None:
        data["percentage_of_budget_authority"] = await _percentage_of_active_budget(repos, data["reserve_amount"])
    return await repos.reserves.create(MTWReserve(**data))


@router.put(
    "/mtw-reserves/{reserve_id}",
    response_model=MTWReserveRead,
    summary="Update MTW Reserve",
    responses={404: {"description": "MTW reserve not found"}},
)
async def update_mtw_reserve(
    reserve_id: str, reserve_in: MTWReserveUpdate, repos: ReposDep, _: WriterDep
) -> MTWReserve:
    reserve = await _get_reserve_or_404(repos, reserve_id)
    changes = reserve_in.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(reserve, field, value)
    if changes.get("percentage_of_budget_authority") is None and "reserve_amount" in changes:
        reserve.percentage_of_budget_authority = await _percentage_of_active_budget(
            repos, float(reserve.reserve_amount)
        )
    return await repos.reserves.update(reserve)


@router.delete(
    "/mtw-reserves/{reserve_id}",
    response_model=MessageResponse,
    summary="Delete MTW Reserve",
    responses={404: {"description": "MTW reserve not found"}},
)
async def delete_mtw_reserve(reserve_id: str, repos: ReposDep, _: AdminDep) -> MessageResponse:
    if not await repos.reserves.delete(reserve_id):
        raise HTTPException(status_code=404, detail="MTW reserve not found")
    return MessageResponse(message="MTW reserve deleted successfully")
