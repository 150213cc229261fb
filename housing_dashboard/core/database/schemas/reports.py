"""
Schema models for report generation requests and responses.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import CamelModel


class ReportType(str, Enum):
    """Kind of report the writer produces."""

    EXECUTIVE_SUMMARY = "executive_summary"
    VOUCHER_ANALYSIS = "voucher_analysis"
    BUDGET_FORECAST = "budget_forecast"
    CUSTOM_REPORT = "custom_report"


class ReportTone(str, Enum):
    FORMAL = "formal"
    CONVERSATIONAL = "conversational"
    TECHNICAL = "technical"


class ReportLength(str, Enum):
    BRIEF = "brief"
    STANDARD = "standard"
    DETAILED = "detailed"


class ReportFormatting(CamelModel):
    """Formatting options applied to streamed reports."""

    include_headings: bool = True
    include_charts: bool = True
    include_recommendations: bool = True
    tone: ReportTone = ReportTone.FORMAL
    length: ReportLength = ReportLength.STANDARD


class Timeframe(CamelModel):
    start_date: date
    end_date: date


class StreamReportRequest(CamelModel):
    """Decoded ``requestBody`` of the streaming report endpoint.

    ``report_type`` is kept as a plain string so that unknown types reach the
    stream and are reported as an error event.
    """

    report_type: str
    timeframe: Timeframe
    voucher_type: Optional[str] = None
    forecast_months: Optional[int] = Field(default=None, ge=1, le=24)
    style_template: Optional[str] = Field(default=None, description="StyleTemplate id")
    custom_prompt: Optional[str] = None
    formatting: ReportFormatting = Field(default_factory=ReportFormatting)


class ExportPdfRequest(CamelModel):
    content: Optional[str] = None
    title: str = "AI Generated Report"


class ExecutiveSummaryResponse(CamelModel):
    summary: str
    timeframe: Timeframe
    data_points_analyzed: int


class VoucherTypeReportResponse(CamelModel):
    report: str
    voucher_type: str
    timeframe: Timeframe
    data_points_analyzed: int


class BudgetForecastResponse(CamelModel):
    forecast: str
    forecast_months: int
    historical_timeframe: Timeframe
    data_points_analyzed: int
