"""
Helpers shared by the API routers for query and path parameter checks.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple, Type

from fastapi import HTTPException


def parse_date(value: str) -> date:
    """Parse an ISO date or datetime string.

    Raises:
        HTTPException: 400 "Invalid date format"
    """
    try:
        return datetime.fromisoformat(value.strip()).date()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format")


def required_date_range(start: Optional[str], end: Optional[str]) -> Tuple[date, date]:
    """Both bounds of a date range, parsed.

    Raises:
        HTTPException: 400 when a bound is missing or unparsable
    """
    if not start or not end:
        raise HTTPException(status_code=400, detail="Start date and end date are required")
    return parse_date(start), parse_date(end)


def enum_value(value: str, enum_cls: Type[Enum], label: str) -> str:
    """Check a path value against an enum.

    Raises:
        HTTPException: 400 "Invalid <label>"
    """
    try:
        return enum_cls(value).value
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label}")
