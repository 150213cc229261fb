"""
Report Endpoints.

This module serves generated reports about voucher utilization and budget.

Includes:
- Executive summaries, voucher type reports and budget forecasts returned
  in one piece
- Streamed reports over Server-Sent Events (SSE), with formatting options,
  custom prompts and writing style templates
- PDF export of a generated report
"""

import json
from datetime import date, timedelta
from typing import List, Optional, Tuple

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import Response
from pydantic import ValidationError
from sse_starlette.sse import EventSourceResponse

from housing_dashboard.core.database.entities import VoucherType
from housing_dashboard.core.database.schemas.reports import (
    BudgetForecastResponse,
    ExecutiveSummaryResponse,
    ExportPdfRequest,
    ReportType,
    StreamReportRequest,
    Timeframe,
    VoucherTypeReportResponse,
)
from housing_dashboard.core.database.schemas.style_templates import StyleTemplateSummary
from housing_dashboard.core.logging_config import get_logger
from housing_dashboard.core.monitoring import log_error
from housing_dashboard.reporting import ReportGenerationError, ReportGenerator, generate_synthetic_data
from housing_dashboard.server.core.config import Settings
from housing_dashboard.server.services.deps import AdminDep, ReposDep, SettingsDep
from housing_dashboard.server.services.pdf_export import pdf_filename, render_report_pdf

from .common import enum_value, parse_date

logger = get_logger(__name__)
router = APIRouter()

CONNECTING_MESSAGE = "Connecting to report stream..."
NO_DATA_MESSAGE = "No data found in database. Generating mock data for demonstration..."


def report_generator(app_settings: Settings) -> ReportGenerator:
    return ReportGenerator(app_settings.ai, dev_bypass=app_settings.is_dev_bypass)


def default_timeframe(start_date: Optional[str], end_date: Optional[str]) -> Tuple[date, date]:
    """Requested timeframe; each missing bound defaults to the last year up to today."""
    today = date.today()
    start = parse_date(start_date) if start_date else today - timedelta(days=365)
    end = parse_date(end_date) if end_date else today
    return start, end


def event(payload: dict) -> str:
    return json.dumps(payload)


@router.get(
    "/executive-summary",
    response_model=ExecutiveSummaryResponse,
    summary="Executive Summary",
    description="Generate an executive summary of voucher utilization for a timeframe (default: the last year).",
    responses={404: {"description": "No data available for the selected timeframe"}},
)
async def executive_summary(
    repos: ReposDep,
    app_settings: SettingsDep,
    _: AdminDep,
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
) -> ExecutiveSummaryResponse:
    start, end = default_timeframe(start_date, end_date)
    records = await repos.utilization.list_for_period(start, end)
    if not records:
        raise HTTPException(status_code=404, detail="No data available for the selected timeframe")

    try:
        summary = await report_generator(app_settings).generate(ReportType.EXECUTIVE_SUMMARY.value, records)
    except ReportGenerationError as e:
        logger.error(f"Executive summary failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return ExecutiveSummaryResponse(
        summary=summary,
        timeframe=Timeframe(start_date=start, end_date=end),
        data_points_analyzed=len(records),
    )


@router.get(
    "/voucher-type/{voucher_type}",
    response_model=VoucherTypeReportResponse,
    summary="Voucher Type Report",
    description="Generate an analysis of one voucher program type.",
    responses={
        400: {"description": "Invalid voucher type"},
        404: {"description": "No data available for this voucher type"},
    },
)
async def voucher_type_report(
    voucher_type: str,
    repos: ReposDep,
    app_settings: SettingsDep,
    _: AdminDep,
    start_date: Optional[str] = Query(default=None, alias="startDate"),
    end_date: Optional[str] = Query(default=None, alias="endDate"),
) -> VoucherTypeReportResponse:
    voucher_type = enum_value(voucher_type, VoucherType, "voucher type")
    start, end = default_timeframe(start_date, end_date)
    records = await repos.utilization.list_for_period(start, end, voucher_type=voucher_type)
    if not records:
        raise HTTPException(status_code=404, detail="No data available for this voucher type")

    try:
        report = await report_generator(app_settings).generate(
            ReportType.VOUCHER_ANALYSIS.value, records, voucher_type=voucher_type
        )
    except ReportGenerationError as e:
        logger.error(f"Voucher type report failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return VoucherTypeReportResponse(
        report=report,
        voucher_type=voucher_type,
        timeframe=Timeframe(start_date=start, end_date=end),
        data_points_analyzed=len(records),
    )


@router.get(
    "/budget-forecast",
    response_model=BudgetForecastResponse,
    summary="Budget Forecast",
    description="Forecast HAP spending and utilization for 1 to 24 months from the last year of data.",
    responses={
        400: {"description": "Forecast months must be between 1 and 24"},
        404: {"description": "No historical data available"},
    },
)
async def budget_forecast(
    repos: ReposDep,
    app_settings: SettingsDep,
    _: AdminDep,
    months: int = Query(default=6),
) -> BudgetForecastResponse:
    if not 1 <= months <= 24:
        raise HTTPException(status_code=400, detail="Forecast months must be between 1 and 24")

    start, end = default_timeframe(None, None)
    records = await repos.utilization.list_for_period(start, end)
    if not records:
        raise HTTPException(status_code=404, detail="No historical data available for forecasting")

    try:
        forecast = await report_generator(app_settings).generate(
            ReportType.BUDGET_FORECAST.value, records, forecast_months=months
        )
    except ReportGenerationError as e:
        logger.error(f"Budget forecast failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return BudgetForecastResponse(
        forecast=forecast,
        forecast_months=months,
        historical_timeframe=Timeframe(start_date=start, end_date=end),
        data_points_analyzed=len(records),
    )


def parse_stream_request(request_body: Optional[str]) -> StreamReportRequest:
    """
    Decode the ``requestBody`` query parameter of the stream endpoint.

    Raises:
        HTTPException: 400 when the body is missing, not JSON, lacks the
            report type or timeframe, or fails validation
    """
    if not request_body:
        raise HTTPException(status_code=400, detail="Missing request body")
    try:
        payload = json.loads(request_body)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid request body format")
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Invalid request body format")

    timeframe = payload.get("timeframe")
    if (
        not payload.get("reportType")
        or not isinstance(timeframe, dict)
        or not timeframe.get("startDate")
        or not timeframe.get("endDate")
    ):
        raise HTTPException(status_code=400, detail="Missing required parameters")

    try:
        return StreamReportRequest.model_validate(payload)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid request body format")


@router.get(
    "/stream",
    summary="Stream Report",
    description="Generate a report and stream it as Server-Sent Events.",
    responses={
        200: {
            "description": "SSE stream established",
            "content": {"text/event-stream": {"example": 'data: {"content": "## Overview", "done": false}\n\n'}},
        },
        400: {"description": "Missing or invalid request body"},
    },
)
async def stream_report(
    request: Request,
    repos: ReposDep,
    app_settings: SettingsDep,
    _: AdminDep,
    request_body: Optional[str] = Query(default=None, alias="requestBody"),
):
    """
    Stream a report via Server-Sent Events (SSE).

    ``requestBody`` is a JSON document with ``reportType``, ``timeframe``
    {startDate, endDate} and optionally ``voucherType``, ``forecastMonths``,
    ``customPrompt``, ``styleTemplate`` (a style template id) and
    ``formatting``.

    **Response:**
    - Every event is JSON ``{"content": ..., "done": false}``
    - The last event repeats the whole report with ``done: true``
    - Failures are sent as ``{"error": ..., "done": true}``
    """
    body = parse_stream_request(request_body)
    start, end = body.timeframe.start_date, body.timeframe.end_date

    records: List = await repos.utilization.list_for_period(start, end)
    used_synthetic = not records
    if used_synthetic:
        records = generate_synthetic_data(start, end)

    style_content: Optional[str] = None
    if body.style_template:
        template = await repos.style_templates.get_by_id(body.style_template)
        if template is not None:
            style_content = template.content
        else:
            logger.warning(f"Style template {body.style_template} not found; streaming without style instructions")

    generator = report_generator(app_settings)
    logger.info(f"Starting {body.report_type} report stream for {start} to {end} ({len(records)} records)")

    async def event_generator():
        yield event({"content": CONNECTING_MESSAGE, "done": False})
        if used_synthetic:
            yield event({"content": NO_DATA_MESSAGE, "done": False})

        parts: List[str] = []
        try:
            async for chunk in generator.stream(
                body.report_type,
                records,
                formatting=body.formatting,
                voucher_type=body.voucher_type,
                forecast_months=body.forecast_months,
                custom_prompt=body.custom_prompt,
                style_content=style_content,
            ):
                if await request.is_disconnected():
                    logger.info(f"Client disconnected from {body.report_type} report stream")
                    return
                parts.append(chunk)
                yield event({"content": chunk, "done": False})
        except ReportGenerationError as e:
            logger.error(f"Error in {body.report_type} report stream: {e}")
            log_error(
                error_type="ReportGenerationError", error_message=str(e), context={"report_type": body.report_type}
            )
            yield event({"error": str(e), "done": True})
            return

        yield event({"content": "".join(parts), "done": True})

    return EventSourceResponse(event_generator())


@router.post(
    "/export-pdf",
    summary="Export Report As PDF",
    description="Render report text as a downloadable PDF.",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "The rendered PDF"},
        400: {"description": "Report content is required"},
    },
)
async def export_pdf(payload: ExportPdfRequest, _: AdminDep) -> Response:
    if not payload.content or not payload.content.strip():
        raise HTTPException(status_code=400, detail="Report content is required")
    title = payload.title or "AI Generated Report"
    pdf = render_report_pdf(payload.content, title)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(title)}"'},
    )


@router.get("/style-templates", response_model=List[StyleTemplateSummary], summary="List Style Templates")
async def list_style_templates(repos: ReposDep, _: AdminDep):
    return await repos.style_templates.list_summaries()
