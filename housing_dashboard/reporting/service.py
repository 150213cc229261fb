"""
Report generation service.

The generator chooses a report writer (pydantic-ai or canned mock), builds the
prompt for the requested report and produces the text either in one piece or
as a stream of chunks.
"""

import random
import time
from datetime import date, timedelta
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence
from uuid import uuid4

from housing_dashboard.core.database.entities.hcv_utilization import VoucherType
from housing_dashboard.core.database.schemas.reports import ReportFormatting, ReportType
from housing_dashboard.core.logging_config import get_logger
from housing_dashboard.core.monitoring import log_report_generation
from housing_dashboard.server.core.config import AIConfig

from . import mock_reports, prompts
from .adapters.mock import MockReportWriter
from .adapters.pydantic_ai import PydanticAIReportWriter, verify_api_key
from .base import ReportGenerationError, ReportWriterBase, ReportWriterConfig

logger = get_logger(__name__)

SYNTHETIC_MAX_DAYS = 30

_REPORT_LABELS = {
    ReportType.EXECUTIVE_SUMMARY.value: "executive summary",
    ReportType.VOUCHER_ANALYSIS.value: "voucher type report",
    ReportType.BUDGET_FORECAST.value: "budget forecast",
    ReportType.CUSTOM_REPORT.value: "custom report",
}


def mock_chunks(
    report_type: str,
    voucher_type: Optional[str] = None,
    forecast_months: Optional[int] = None,
    custom_prompt: Optional[str] = None,
) -> List[str]:
    """Canned streaming chunks for a report type."""
    if report_type == ReportType.EXECUTIVE_SUMMARY.value:
        return mock_reports.split_chunks(mock_reports.EXECUTIVE_SUMMARY)
    if report_type == ReportType.VOUCHER_ANALYSIS.value:
        report = mock_reports.voucher_type_report(voucher_type or VoucherType.TENANT_BASED.value)
        return mock_reports.split_chunks(report)
    if report_type == ReportType.BUDGET_FORECAST.value:
        return mock_reports.split_chunks(mock_reports.budget_forecast(forecast_months or 6))
    if report_type == ReportType.CUSTOM_REPORT.value:
        return [mock_reports.custom_report(custom_prompt or "")]
    return [mock_reports.INVALID_REPORT]


def generate_synthetic_data(start: date, end: date, rng: Optional[random.Random] = None) -> List[Dict[str, Any]]:
    """Fabricate utilization rows for demonstrations when the database has none.

    One row per day and voucher type, for at most ``SYNTHETIC_MAX_DAYS`` days
    starting at ``start``. Rows use the same camelCase shape as serialized
    records.
    """
    rng = rng or random.Random()
    days = max(1, min((end - start).days, SYNTHETIC_MAX_DAYS))
    rows: List[Dict[str, Any]] = []
    for offset in range(days):
        reporting_date = start + timedelta(days=offset)
        for voucher_type in VoucherType:
            authorized = rng.randint(50, 149)
            leased = rng.randint(0, authorized - 1)
            average_hap = rng.randint(700, 1199)
            rows.append(
                {
                    "id": str(uuid4()),
                    "reportingDate": reporting_date.isoformat(),
                    "voucherType": voucher_type.value,
                    "authorizedVouchers": authorized,
                    "leasedVouchers": leased,
                    "utilizationRate": round(leased / authorized * 100, 2),
                    "hapExpenses": float(leased * average_hap),
                    "averageHapPerUnit": float(average_hap),
                    "budgetUtilization": float(rng.randint(0, 99)),
                    "notes": "Synthetic data generated for demonstration",
                }
            )
    return rows


class ReportGenerator:
    """Produce reports with a model or with canned content.

    Args:
        ai: Report writer configuration
        dev_bypass: Whether development auth bypass is active; in that mode a
            key that fails verification falls back to canned reports
    """

    def __init__(self, ai: AIConfig, dev_bypass: bool = False) -> None:
        self._ai = ai
        self._dev_bypass = dev_bypass

    async def use_mock(self) -> bool:
        """Decide whether canned reports replace model output."""
        if self._ai.use_mock:
            return True
        if not self._ai.openai_api_key:
            logger.info("No OPENAI_API_KEY configured; serving canned reports")
            return True
        if self._dev_bypass:
            return not await verify_api_key(self._ai.report_model, self._ai.report_timeout)
        return False

    def _model_writer(self, name: str, settings: prompts.GenerationSettings) -> ReportWriterBase:
        return PydanticAIReportWriter(
            ReportWriterConfig(
                name=name,
                model=self._ai.report_model,
                temperature=settings.temperature,
                max_tokens=settings.max_tokens,
                timeout=self._ai.report_timeout,
            )
        )

    @staticmethod
    def _check_request(report_type: str, voucher_type: Optional[str], custom_prompt: Optional[str]) -> None:
        if report_type not in _REPORT_LABELS:
            raise ReportGenerationError("Invalid report type")
        if report_type == ReportType.VOUCHER_ANALYSIS.value and not voucher_type:
            raise ReportGenerationError("Voucher type is required for voucher analysis")
        if report_type == ReportType.CUSTOM_REPORT.value and not custom_prompt:
            raise ReportGenerationError("Custom prompt is required for custom reports")

    async def generate(
        self,
        report_type: str,
        records: Sequence[Any],
        voucher_type: Optional[str] = None,
        forecast_months: int = 6,
    ) -> str:
        """Generate a whole executive summary, voucher type report or budget forecast.

        Raises:
            ReportGenerationError: On unsupported report types or writer failures
        """
        if report_type not in prompts.NON_STREAMING_SETTINGS:
            raise ReportGenerationError("Invalid report type")
        self._check_request(report_type, voucher_type, None)
        label = _REPORT_LABELS[report_type]
        started = time.perf_counter()

        if await self.use_mock():
            logger.info(f"Using canned content for {label}")
            text = "".join(mock_chunks(report_type, voucher_type=voucher_type, forecast_months=forecast_months))
            log_report_generation(report_type, 1, (time.perf_counter() - started) * 1000, mock=True)
            return text

        data_json = prompts.serialize_data(records)
        if report_type == ReportType.EXECUTIVE_SUMMARY.value:
            prompt = prompts.executive_summary_prompt(data_json)
        elif report_type == ReportType.VOUCHER_ANALYSIS.value:
            prompt = prompts.voucher_type_prompt(voucher_type, data_json)
        else:
            prompt = prompts.budget_forecast_prompt(forecast_months, data_json)

        async with self._model_writer(report_type, prompts.NON_STREAMING_SETTINGS[report_type]) as writer:
            response = await writer.invoke(prompt)

        if not response.success:
            raise ReportGenerationError(f"Failed to generate {label}")
        log_report_generation(report_type, 1, (time.perf_counter() - started) * 1000)
        return response.content or f"Unable to generate {label}."

    async def stream(
        self,
        report_type: str,
        records: Sequence[Any],
        formatting: Optional[ReportFormatting] = None,
        voucher_type: Optional[str] = None,
        forecast_months: Optional[int] = None,
        custom_prompt: Optional[str] = None,
        style_content: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """Stream a report as text chunks.

        Raises:
            ReportGenerationError: On invalid requests or writer failures
        """
        self._check_request(report_type, voucher_type, custom_prompt)
        formatting = formatting or ReportFormatting()
        months = forecast_months or 6
        started = time.perf_counter()
        count = 0

        if await self.use_mock():
            logger.info(f"Using canned content for streaming report ({report_type})")
            writer: ReportWriterBase = MockReportWriter(
                ReportWriterConfig(name=f"mock-{report_type}", model="mock"),
                content="",
                chunks=mock_chunks(report_type, voucher_type, months, custom_prompt),
                chunk_delay=self._ai.mock_chunk_delay,
            )
            prompt = ""
        else:
            if report_type == ReportType.VOUCHER_ANALYSIS.value:
                records = [record for record in records if _voucher_type_of(record) == voucher_type]
            data_json = prompts.serialize_data(records)
            if report_type == ReportType.CUSTOM_REPORT.value:
                prompt = prompts.build_custom_prompt(custom_prompt, data_json, formatting, style_content)
            else:
                prompt = prompts.build_stream_prompt(
                    report_type,
                    data_json,
                    formatting,
                    voucher_type=voucher_type,
                    forecast_months=months,
                    style_content=style_content,
                )
            writer = self._model_writer(f"stream-{report_type}", prompts.stream_settings(report_type, formatting))

        try:
            async with writer:
                async for chunk in writer.stream(prompt):
                    count += 1
                    yield chunk
        except Exception as e:
            logger.error(f"Error generating streaming {report_type} report: {e}")
            raise ReportGenerationError(f"Failed to generate {report_type} report") from e

        log_report_generation(report_type, count, (time.perf_counter() - started) * 1000, mock=writer.is_mock)


def _voucher_type_of(record: Any) -> Optional[str]:
    if isinstance(record, dict):
        return record.get("voucherType")
    return getattr(record, "voucher_type", None)
