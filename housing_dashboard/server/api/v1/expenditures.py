"""
HAP Expenditure Endpoints.

CRUD for HAP expenditures, lookups by type and date range, and spending
summaries by type and by month.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from housing_dashboard.core.database.entities import ExpenditureType, HAPExpenditure
from housing_dashboard.core.database.schemas.base import MessageResponse
from housing_dashboard.core.database.schemas.expenditures import (
    ExpenditureTypeTotal,
    HAPExpenditureCreate,
    HAPExpenditureRead,
    HAPExpenditureUpdate,
    MonthlyExpenditureTotal,
)
from housing_dashboard.server.services.deps import AdminDep, CurrentUserDep, ReposDep, WriterDep

from .common import enum_value, parse_date, required_date_range

router = APIRouter()


async def _get_or_404(repos: ReposDep, expenditure_id: str) -> HAPExpenditure:
    expenditure = await repos.expenditures.get_by_id(expenditure_id)
    if expenditure is None:
        raise HTTPException(status_code=404, detail="Expenditure not found")
    return expenditure


@router.get("", response_model=List[HAPExpenditureRead], summary="List Expenditures")
async def list_expenditures(repos: ReposDep, _: CurrentUserDep) -> List[HAPExpenditure]:
    return await repos.expenditures.list_latest_first()


@router.get(
    "/type/{expenditure_type}",
    response_model=List[HAPExpenditureRead],
    summary="Expenditures By Type",
    responses={400: {"description": "Invalid expenditure type"}},
)
async def list_by_type(expenditure_type: str, repos: ReposDep, _: CurrentUserDep) -> List[HAPExpenditure]:
    return await repos.expenditures.list_by_type(enum_value(expenditure_type, ExpenditureType, "expenditure type"))


@router.get(
    "/date-range",
    response_model=List[HAPExpenditureRead],
    summary="Expenditures In Date Range",
    responses={400: {"description": "Missing or invalid dates"}},
)
async def list_by_date_range(
    repos: ReposDep,
    _: CurrentUserDep,
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
) -> List[HAPExpenditure]:
    start, end = required_date_range(start_date, end_date)
    return await repos.expenditures.list_by_date_range(start, end)


@router.get("/summary/by-type", response_model=List[ExpenditureTypeTotal], summary="Spending By Type")
async def summary_by_type(
    repos: ReposDep,
    _: CurrentUserDep,
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
):
    """Totals per expenditure type, optionally restricted to a date range."""
    start = parse_date(start_date) if start_date else None
    end = parse_date(end_date) if end_date else None
    return await repos.expenditures.summary_by_type(start, end)


@router.get("/summary/monthly/{year}", response_model=List[MonthlyExpenditureTotal], summary="Monthly Spending")
async def monthly_summary(year: int, repos: ReposDep, _: CurrentUserDep):
    """Totals per month (``YYYY-MM``) and type for one calendar year."""
    return await repos.expenditures.monthly_summary(year)


@router.get(
    "/{expenditure_id}",
    response_model=HAPExpenditureRead,
    summary="Get Expenditure",
    responses={404: {"description": "Expenditure not found"}},
)
async def get_expenditure(expenditure_id: str, repos: ReposDep, _: CurrentUserDep) -> HAPExpenditure:
    return await _get_or_404(repos, expenditure_id)


@router.post("", response_model=HAPExpenditureRead, status_code=status.HTTP_201_CREATED, summary="Create Expenditure")
async def create_expenditure(expenditure_in: HAPExpenditureCreate, repos: ReposDep, _: WriterDep) -> HAPExpenditure:
    return await repos.expenditures.create(HAPExpenditure(**expenditure_in.model_dump()))


@router.put(
    "/{expenditure_id}",
    response_model=HAPExpenditureRead,
    summary="Update Expenditure",
    responses={404: {"description": "Expenditure not found"}},
)
async def update_expenditure(
    expenditure_id: str, expenditure_in: HAPExpenditureUpdate, repos: ReposDep, _: WriterDep
) -> HAPExpenditure:
    expenditure = await _get_or_404(repos, expenditure_id)
    for field, value in expenditure_in.model_dump(exclude_unset=True).items():
        setattr(expenditure, field, value)
    return await repos.expenditures.update(expenditure)


@router.delete(
    "/{expenditure_id}",
    response_model=MessageResponse,
    summary="Delete Expenditure",
    responses={404: {"description": "Expenditure not found"}},
)
async def delete_expenditure(expenditure_id: str, repos: ReposDep, _: AdminDep) -> MessageResponse:
    if not await repos.expenditures.delete(expenditure_id):
        raise HTTPException(status_code=404, detail="Expenditure not found")
    return MessageResponse(message="Expenditure deleted successfully")
