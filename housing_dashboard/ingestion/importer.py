"""
Strict spreadsheet import.

Each import type expects exact camelCase column names. Required columns are
checked on the first row; afterwards every row is converted and saved on its
own, and row failures are collected instead of aborting the file.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font
from pydantic import BaseModel, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from housing_dashboard.core.database.entities import (
    BudgetAuthority,
    Commitment,
    CommitmentStatus,
    CommitmentType,
    ExpenditureType,
    HAPExpenditure,
    HCVUtilization,
    MTWReserve,
    VoucherType,
)
from housing_dashboard.core.database.repositories import RepositoryBundle
from housing_dashboard.core.database.schemas.budget import (
    MAX_RESERVE_PERCENTAGE,
    BudgetAuthorityCreate,
    MTWReserveCreate,
)
from housing_dashboard.core.database.schemas.commitments import CommitmentCreate
from housing_dashboard.core.database.schemas.expenditures import HAPExpenditureCreate
from housing_dashboard.core.database.schemas.hcv_utilization import HCVUtilizationCreate

from .errors import ImportFileError, RowImportError
from .readers import read_table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImportSpec:
    """Columns of one import type."""

    required: Tuple[str, ...]
    optional: Tuple[str, ...] = ()

    @property
    def columns(self) -> Tuple[str, ...]:
        return self.required + self.optional


IMPORT_SPECS: Dict[str, ImportSpec] = {
    "budget": ImportSpec(
        required=("totalBudgetAmount", "fiscalYear", "effectiveDate"),
        optional=("expirationDate", "isActive", "notes"),
    ),
    "reserves": ImportSpec(
        required=("reserveAmount", "asOfDate"),
        optional=("minimumReserveLevel", "notes"),
    ),
    "expenditures": ImportSpec(
        required=("expenditureDate", "expenditureType", "amount"),
        optional=("description", "notes"),
    ),
    "commitments": ImportSpec(
        required=("commitmentNumber", "activityDescription", "commitmentType", "amountCommitted"),
        optional=(
            "accountType",
            "commitmentDate",
            "obligationDate",
            "status",
            "amountObligated",
            "amountExpended",
            "projectedFullExpenditureDate",
            "notes",
        ),
    ),
    "hcv-utilization": ImportSpec(
        required=(
            "reportingDate",
            "voucherType",
            "authorizedVouchers",
            "leasedVouchers",
            "utilizationRate",
            "hapExpenses",
        ),
        optional=("averageHapPerUnit", "budgetUtilization", "notes"),
    ),
}


# Cell conversion


def _present(value: Any) -> bool:
    return value is not None and value != ""


def to_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise RowImportError(f"Invalid number for {field}: {value}")
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError as e:
        raise RowImportError(f"Invalid number for {field}: {value}") from e


def to_int(value: Any, field: str) -> int:
    number = to_float(value, field)
    if not number.is_integer():
        raise RowImportError(f"Invalid integer for {field}: {value}")
    return int(number)


def to_date(value: Any, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        parsed = pd.to_datetime(str(value).strip())
    except (ValueError, TypeError, OverflowError) as e:
        raise RowImportError(f"Invalid date for {field}: {value}") from e
    if pd.isna(parsed):
        raise RowImportError(f"Invalid date for {field}: {value}")
    return parsed.date()


def is_truthy(value: Any) -> bool:
    """Spreadsheet boolean: ``True`` or the string ``true`` in any case."""
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "true"


def _validated(schema: type[BaseModel], fields: Dict[str, Any]) -> Dict[str, Any]:
    try:
        return schema.model_validate(fields).model_dump()
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise RowImportError(f"{location}: {first['msg']}") from e


def _check_enum(value: Any, enum_cls, label: str) -> str:
    allowed = {member.value for member in enum_cls}
    if value not in allowed:
        raise RowImportError(f"Invalid {label}: {value}")
    return value


class StrictImporter:
    """Import column-named spreadsheets into the database.

    Args:
        repos: Repository bundle sharing the request session
    """

    def __init__(self, repos: RepositoryBundle) -> None:
        self._repos = repos
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Awaitable[None]]] = {
            "budget": self._import_budget,
            "reserves": self._import_reserve,
            "expenditures": self._import_expenditure,
            "commitments": self._import_commitment,
            "hcv-utilization": self._import_utilization,
        }
        self._active_budget_total: Optional[float] = None

    async def import_file(self, import_type: str, path: Path) -> Dict[str, Any]:
        """Import every row of ``path``.

        Returns:
            ``{"success": <saved rows>, "errors": [{"row": n, "error": msg}]}``

        Raises:
            ImportFileError: On unknown import types, unreadable or empty files
                and missing required columns
        """
        spec = IMPORT_SPECS.get(import_type)
        if spec is None:
            raise ImportFileError("Invalid import type")

        rows = read_table(path)
        if not rows:
            raise ImportFileError("Invalid or empty file")
        for column in spec.required:
            if column not in rows[0]:
                raise ImportFileError(f"Missing required field: {column}")

        if import_type == "reserves":
            active = await self._repos.budget_authorities.get_active()
            self._active_budget_total = float(active.total_budget_amount) if active else None

        handler = self._handlers[import_type]
        success = 0
        errors: List[Dict[str, Any]] = []
        for number, row in enumerate(rows, start=1):
            try:
                await handler(row)
                success += 1
            except RowImportError as e:
                errors.append({"row": number, "error": str(e)})
            except SQLAlchemyError as e:
                await self._repos.session.rollback()
                logger.warning(f"Database error importing {import_type} row {number}: {e}")
                errors.append({"row": number, "error": "Database error while saving row"})

        logger.info(f"Imported {success} {import_type} rows with {len(errors)} errors from {path.name}")
        return {"success": success, "errors": errors}

    async def _import_budget(self, row: Dict[str, Any]) -> None:
        active = is_truthy(row.get("isActive"))
        fields = {
            "total_budget_amount": to_float(row.get("totalBudgetAmount"), "totalBudgetAmount"),
            "fiscal_year": to_int(row.get("fiscalYear"), "fiscalYear"),
            "effective_date": to_date(row.get("effectiveDate"), "effectiveDate"),
            "is_active": active,
        }
        if _present(row.get("expirationDate")):
            fields["expiration_date"] = to_date(row["expirationDate"], "expirationDate")
        if _present(row.get("notes")):
            fields["notes"] = str(row["notes"])

        data = _validated(BudgetAuthorityCreate, fields)
        if active:
            await self._repos.budget_authorities.deactivate_all()
        await self._repos.budget_authorities.create(BudgetAuthority(**data))

    async def _import_reserve(self, row: Dict[str, Any]) -> None:
        amount = to_float(row.get("reserveAmount"), "reserveAmount")
        fields: Dict[str, Any] = {
            "reserve_amount": amount,
            "as_of_date": to_date(row.get("asOfDate"), "asOfDate"),
        }
        if _present(row.get("minimumReserveLevel")):
            fields["minimum_reserve_level"] = to_float(row["minimumReserveLevel"], "minimumReserveLevel")
        if _present(row.get("notes")):
            fields["notes"] = str(row["notes"])
        if self._active_budget_total:
            percentage = round(amount / self._active_budget_total * 100, 2)
            fields["percentage_of_budget_authority"] = min(percentage, MAX_RESERVE_PERCENTAGE)

        data = _validated(MTWReserveCreate, fields)
        await self._repos.reserves.create(MTWReserve(**data))

    async def _import_expenditure(self, row: Dict[str, Any]) -> None:
        expenditure_type = _check_enum(row.get("expenditureType"), ExpenditureType, "expenditure type")
        fields: Dict[str, Any] = {
            "expenditure_date": to_date(row.get("expenditureDate"), "expenditureDate"),
            "expenditure_type": expenditure_type,
            "amount": to_float(row.get("amount"), "amount"),
        }
        if _present(row.get("description")):
            fields["description"] = str(row["description"])
        if _present(row.get("notes")):
            fields["notes"] = str(row["notes"])

        data = _validated(HAPExpenditureCreate, fields)
        await self._repos.expenditures.create(HAPExpenditure(**data))

    async def _import_commitment(self, row: Dict[str, Any]) -> None:
        commitment_type = _check_enum(row.get("commitmentType"), CommitmentType, "commitment type")
        fields: Dict[str, Any] = {
            "commitment_number": str(row.get("commitmentNumber")),
            "activity_description": str(row.get("activityDescription")),
            "commitment_type": commitment_type,
            "amount_committed": to_float(row.get("amountCommitted"), "amountCommitted"),
        }
        if _present(row.get("status")):
            fields["status"] = _check_enum(row["status"], CommitmentStatus, "commitment status")
        if _present(row.get("accountType")):
            fields["account_type"] = str(row["accountType"])
        for column, field in (
            ("commitmentDate", "commitment_date"),
            ("obligationDate", "obligation_date"),
            ("projectedFullExpenditureDate", "projected_full_expenditure_date"),
        ):
            if _present(row.get(column)):
                fields[field] = to_date(row[column], column)
        for column, field in (("amountObligated", "amount_obligated"), ("amountExpended", "amount_expended")):
            if _present(row.get(column)):
                fields[field] = to_float(row[column], column)
        if _present(row.get("notes")):
            fields["notes"] = str(row["notes"])

        data = _validated(CommitmentCreate, fields)
        await self._repos.commitments.create(Commitment(**data))

    async def _import_utilization(self, row: Dict[str, Any]) -> None:
        voucher_type = _check_enum(row.get("voucherType"), VoucherType, "voucher type")
        fields: Dict[str, Any] = {
            "reporting_date": to_date(row.get("reportingDate"), "reportingDate"),
            "voucher_type": voucher_type,
            "authorized_vouchers": to_int(row.get("authorizedVouchers"), "authorizedVouchers"),
            "leased_vouchers": to_int(row.get("leasedVouchers"), "leasedVouchers"),
            "utilization_rate": to_float(row.get("utilizationRate"), "utilizationRate"),
            "hap_expenses": to_float(row.get("hapExpenses"), "hapExpenses"),
        }
        for column, field in (
            ("averageHapPerUnit", "average_hap_per_unit"),
            ("budgetUtilization", "budget_utilization"),
        ):
            if _present(row.get(column)):
                fields[field] = to_float(row[column], column)
        if _present(row.get("notes")):
            fields["notes"] = str(row["notes"])

        data = _validated(HCVUtilizationCreate, fields)
        await self._repos.utilization.create(HCVUtilization(**data))


def build_template(import_type: str) -> bytes:
    """Build an Excel template whose header row lists the columns of ``import_type``.

    Raises:
        ImportFileError: For unknown template types
    """
    spec = IMPORT_SPECS.get(import_type)
    if spec is None:
        raise ImportFileError("Invalid template type")

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = import_type
    sheet.append(list(spec.columns))
    for index, cell in enumerate(sheet[1]):
        if index < len(spec.required):
            cell.font = Font(bold=True)
        sheet.column_dimensions[cell.column_letter].width = max(14, len(str(cell.value)) + 4)

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def template_filename(import_type: str) -> str:
    return f"{import_type.replace('-', '_')}_template.xlsx"
