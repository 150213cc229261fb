"""
HCV Utilization Endpoints.

CRUD for Housing Choice Voucher utilization records, the utilization
dashboard for the current year, and monthly trends per voucher type.
"""

import calendar
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from housing_dashboard.core.database.entities import HCVUtilization, VoucherType
from housing_dashboard.core.database.schemas.base import MessageResponse
from housing_dashboard.core.database.schemas.hcv_utilization import (
    HCVDashboard,
    HCVUtilizationCreate,
    HCVUtilizationRead,
    HCVUtilizationUpdate,
    MonthlyUtilization,
    UtilizationByType,
    UtilizationTrend,
    YTDUtilization,
)
from housing_dashboard.server.services.deps import AdminDep, CurrentUserDep, ReposDep, WriterDep

from .common import enum_value, required_date_range

router = APIRouter()

# Reporting dates are limited to 2000..2100
MAX_TREND_MONTHS = 1200


def months_before(day: date, months: int) -> date:
    """The same day ``months`` calendar months earlier, clamped to the month's length."""
    index = day.year * 12 + day.month - 1 - months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


async def _get_or_404(repos: ReposDep, record_id: str) -> HCVUtilization:
    record = await repos.utilization.get_by_id(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="HCV utilization record not found")
    return record


@router.get("", response_model=List[HCVUtilizationRead], summary="List Utilization Records")
async def list_utilization(repos: ReposDep, _: CurrentUserDep) -> List[HCVUtilization]:
    return await repos.utilization.list_latest_first()


@router.get(
    "/dashboard",
    response_model=HCVDashboard,
    summary="Utilization Dashboard",
    description="Latest record, year-to-date totals, averages per voucher type and the monthly trend.",
)
async def dashboard(repos: ReposDep, _: CurrentUserDep) -> HCVDashboard:
    """
    Utilization dashboard.

    Aggregates cover the current calendar year. ``latestUtilization`` is null
    when no record exists.
    """
    today = date.today()
    year_start = date(today.year, 1, 1)
    latest = await repos.utilization.get_latest()
    return HCVDashboard(
        latest_utilization=HCVUtilizationRead.model_validate(latest) if latest else None,
        ytd_utilization=YTDUtilization(**await repos.utilization.ytd_totals(year_start)),
        utilization_by_type=[UtilizationByType(**row) for row in await repos.utilization.by_type_since(year_start)],
        monthly_trend=[MonthlyUtilization(**row) for row in await repos.utilization.monthly_trend(today.year)],
    )


@router.get("/trends", response_model=List[UtilizationTrend], summary="Utilization Trends")
async def trends(repos: ReposDep, _: CurrentUserDep, months: int = Query(default=12, ge=1, le=MAX_TREND_MONTHS)):
    """Monthly totals per voucher type over the last ``months`` months."""
    return await repos.utilization.trends(months_before(date.today(), months))


@router.get(
    "/type/{voucher_type}",
    response_model=List[HCVUtilizationRead],
    summary="Utilization By Voucher Type",
    responses={400: {"description": "Invalid voucher type"}},
)
async def list_by_type(voucher_type: str, repos: ReposDep, _: CurrentUserDep) -> List[HCVUtilization]:
    return await repos.utilization.list_by_type(enum_value(voucher_type, VoucherType, "voucher type"))


@router.get(
    "/date-range",
    response_model=List[HCVUtilizationRead],
    summary="Utilization In Date Range",
    responses={400: {"description": "Missing or invalid dates"}},
)
async def list_by_date_range(
    repos: ReposDep,
    _: CurrentUserDep,
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
) -> List[HCVUtilization]:
    start, end = required_date_range(start_date, end_date)
    return await repos.utilization.list_by_date_range(start, end)


@router.get(
    "/{record_id}",
    response_model=HCVUtilizationRead,
    summary="Get Utilization Record",
    responses={404: {"description": "HCV utilization record not found"}},
)
async def get_utilization(record_id: str, repos: ReposDep, _: CurrentUserDep) -> HCVUtilization:
    return await _get_or_404(repos, record_id)


@router.post(
    "", response_model=HCVUtilizationRead, status_code=status.HTTP_201_CREATED, summary="Create Utilization Record"
)
async def create_utilization(record_in: HCVUtilizationCreate, repos: ReposDep, _: WriterDep) -> HCVUtilization:
    return await repos.utilization.create(HCVUtilization(**record_in.model_dump()))


@router.put(
    "/{record_id}",
    response_model=HCVUtilizationRead,
    summary="Update Utilization Record",
    responses={404: {"description": "HCV utilization record not found"}},
)
async def update_utilization(
    record_id: str, record_in: HCVUtilizationUpdate, repos: ReposDep, _: WriterDep
) -> HCVUtilization:
    record = await _get_or_404(repos, record_id)
    for field, value in record_in.model_dump(exclude_unset=True).items():
        setattr(record, field, value)
    return await repos.utilization.update(record)


@router.delete(
    "/{record_id}",
    response_model=MessageResponse,
    summary="Delete Utilization Record",
    responses={404: {"description": "HCV utilization record not found"}},
)
async def delete_utilization(record_id: str, repos: ReposDep, _: AdminDep) -> MessageResponse:
    if not await repos.utilization.delete(record_id):
        raise HTTPException(status_code=404, detail="HCV utilization record not found")
    return MessageResponse(message="HCV utilization record deleted successfully")
