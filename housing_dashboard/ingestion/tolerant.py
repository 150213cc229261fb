"""
Tolerant ingestion of utilization exports and style template extraction.

Utilization exports come from different systems, so column names, date formats
and number formats vary. Headers are normalized, each field is looked up under
several candidate names (exact match first, then substring match), dates fall
back through several formats and unparsable numbers count as zero with a
warning. Rows that still cannot be mapped are reported, the rest are saved.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
import pdfplumber
from docx import Document

from housing_dashboard.core.database.entities import HCVUtilization, StyleTemplate, VoucherType
from housing_dashboard.core.database.repositories import HCVUtilizationRepository, StyleTemplateRepository

from .errors import ImportFileError, RowImportError
from .readers import read_table

logger = logging.getLogger(__name__)

DATE_CANDIDATES = ("reporting_date", "reportingdate", "date", "report_date", "month", "period")
VOUCHER_TYPE_CANDIDATES = ("voucher_type", "vouchertype", "type", "voucher", "program_type", "programtype")
AUTHORIZED_CANDIDATES = ("authorized_vouchers", "authorizedvouchers", "authorized", "auth_vouchers", "total_authorized")
LEASED_CANDIDATES = ("leased_vouchers", "leasedvouchers", "leased", "units_leased", "total_leased")
HAP_CANDIDATES = ("hap_expenses", "hapexpenses", "expenses", "hap", "total_hap", "expenditures")

EXCEL_EPOCH = date(1899, 12, 30)
MIN_YEAR = 2000
MAX_YEAR = 2100

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_UNDERSCORES = re.compile(r"_+")
_NON_NUMERIC = re.compile(r"[^0-9.\-]")
_DATE_SEPARATORS = re.compile(r"[/\-]")


def normalize_header(header: Any) -> str:
    """Lowercase a header and reduce everything but ``[a-z0-9]`` to single underscores."""
    text = "" if header is None else str(header)
    # pandas names blank header cells "Unnamed: <n>"
    if not text.strip() or text.startswith("Unnamed:"):
        return "unknown_column"
    normalized = _UNDERSCORES.sub("_", _NON_ALNUM.sub("_", text.lower())).strip("_")
    return normalized or "unknown_column"


def normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    return {normalize_header(key): value for key, value in row.items()}


def _has_value(value: Any) -> bool:
    return value is not None and value != ""


def find_value(row: Dict[str, Any], candidates: Iterable[str], default: Any = None) -> Any:
    """Look a field up under several candidate column names.

    Exact key matches are tried first in candidate order, then the first row
    key containing a candidate. Empty values never match.
    """
    candidates = list(candidates)
    for key in candidates:
        if _has_value(row.get(key)):
            return row[key]
    for candidate in candidates:
        needle = candidate.lower()
        for key, value in row.items():
            if needle in key.lower() and _has_value(value):
                return value
    return default


def _in_range(value: date) -> bool:
    return MIN_YEAR <= value.year <= MAX_YEAR


def _parse_date_string(text: str) -> Optional[date]:
    text = text.strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    parts = _DATE_SEPARATORS.split(text)
    if len(parts) == 3 and len(parts[2]) == 4:
        try:
            first, second, year = (int(part) for part in parts)
        except ValueError:
            return None
        for month, day in ((first, second), (second, first)):
            try:
                return date(year, month, day)
            except ValueError:
                continue
        return None
    # Month and period columns: "2024-03", "2024/03/15", "March 2024"
    try:
        parsed = pd.to_datetime(text)
    except (ValueError, TypeError, OverflowError):
        return None
    return None if pd.isna(parsed) else parsed.date()


def parse_reporting_date(raw: Any) -> date:
    """Parse a reporting date from a date, an Excel serial number or a string.

    Strings are tried as ISO 8601, then as MM/DD/YYYY and DD/MM/YYYY with
    ``/`` or ``-`` separators, then with pandas for forms such as ``2024-03``
    or ``March 2024`` (the first of the month).

    Raises:
        RowImportError: If no format matches or the year is outside 2000..2100
    """
    parsed: Optional[date]
    if isinstance(raw, datetime):
        parsed = raw.date()
    elif isinstance(raw, date):
        parsed = raw
    elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            parsed = EXCEL_EPOCH + timedelta(days=round(raw))
        except OverflowError:
            parsed = None
    elif isinstance(raw, str):
        parsed = _parse_date_string(raw)
    else:
        parsed = None

    if parsed is None or not _in_range(parsed):
        raise RowImportError(f"Invalid reporting date: {raw}")
    return parsed


def parse_numeric(value: Any, field_name: str) -> float:
    """Parse a loosely formatted number; empty and unparsable values count as 0."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return 0.0 if value != value else float(value)
    cleaned = _NON_NUMERIC.sub("", str(value))
    try:
        return float(cleaned)
    except ValueError:
        logger.warning(f"Invalid {field_name} value: {value}, using 0 instead")
        return 0.0


def map_voucher_type(raw: Any) -> str:
    """Match a voucher type case-insensitively; anything unknown is tenant_based."""
    text = str(raw).strip().lower()
    for voucher_type in VoucherType:
        if voucher_type.value == text:
            return voucher_type.value
    return VoucherType.TENANT_BASED.value


def map_utilization_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """Map a normalized row to HCVUtilization fields.

    Raises:
        RowImportError: When the reporting date is missing or invalid
    """
    raw_date = find_value(row, DATE_CANDIDATES)
    if not _has_value(raw_date):
        raise RowImportError("Missing required reporting date")
    reporting_date = parse_reporting_date(raw_date)

    voucher_type = map_voucher_type(find_value(row, VOUCHER_TYPE_CANDIDATES, VoucherType.TENANT_BASED.value))
    authorized = parse_numeric(find_value(row, AUTHORIZED_CANDIDATES), "authorized vouchers")
    leased = parse_numeric(find_value(row, LEASED_CANDIDATES), "leased vouchers")
    hap_expenses = parse_numeric(find_value(row, HAP_CANDIDATES), "HAP expenses")

    return {
        "reporting_date": reporting_date,
        "voucher_type": voucher_type,
        "authorized_vouchers": int(round(authorized)),
        "leased_vouchers": int(round(leased)),
        "utilization_rate": round(leased / authorized * 100, 2) if authorized > 0 else 0.0,
        "hap_expenses": hap_expenses,
        "average_hap_per_unit": round(hap_expenses / leased, 2) if leased > 0 else 0.0,
        "budget_utilization": 0.0,
        "notes": str(row.get("notes") or ""),
    }


class UtilizationIngester:
    """Ingest loosely formatted utilization files into ``hcv_utilization``."""

    def __init__(self, repository: HCVUtilizationRepository) -> None:
        self._repository = repository

    async def ingest(self, path: Path) -> Dict[str, Any]:
        """Read, map and save every row of a CSV or Excel file.

        Problems reading the file itself are reported as warnings.

        Returns:
            ``{"imported": n, "errors": [{"row": n, "error": msg}], "warnings": [...]}``
        """
        warnings: List[str] = []
        errors: List[Dict[str, Any]] = []

        try:
            rows = read_table(path)
        except ImportFileError as e:
            warnings.append(f"Error parsing file: {e}")
            rows = []
        if not rows and not warnings:
            warnings.append("File appears to be empty or contains no valid data")
        if warnings:
            logger.warning(f"Warnings during file processing: {warnings}")

        records: List[HCVUtilization] = []
        for number, row in enumerate(rows, start=1):
            try:
                records.append(HCVUtilization(**map_utilization_row(normalize_row(row))))
            except RowImportError as e:
                errors.append({"row": number, "error": str(e)})

        imported = await self._repository.create_many(records) if records else 0
        logger.info(f"Ingested {imported} utilization rows from {path.name} ({len(errors)} errors)")
        return {"imported": imported, "errors": errors, "warnings": warnings}


def extract_text(path: Path, kind: str) -> str:
    """Extract plain text from a PDF, Word (.docx) or text file.

    Raises:
        ImportFileError: For unsupported or unreadable documents
    """
    if kind == "pdf":
        try:
            with pdfplumber.open(path) as pdf:
                return "\n".join(page.extract_text() or "" for page in pdf.pages).strip()
        except Exception as e:
            raise ImportFileError(f"Could not read PDF file: {e}") from e
    if kind == "word":
        if path.suffix.lower() == ".doc":
            raise ImportFileError("Legacy .doc files are not supported. Please upload a .docx file.")
        try:
            document = Document(str(path))
        except Exception as e:
            raise ImportFileError(f"Could not read Word file: {e}") from e
        return "\n".join(paragraph.text for paragraph in document.paragraphs).strip()
    if kind == "text":
        return path.read_text(encoding="utf-8", errors="replace")
    raise ImportFileError("Invalid file type for style template. Please use PDF, Word, or text files.")


async def store_style_template(
    repository: StyleTemplateRepository, path: Path, kind: str, name: str
) -> Dict[str, str]:
    """Extract a document's text and save it as a style template."""
    content = extract_text(path, kind)
    template = await repository.create(StyleTemplate(name=name, content=content))
    logger.info(f"Stored style template {template.name!r} ({len(content)} characters)")
    return {"id": template.id, "name": template.name}
