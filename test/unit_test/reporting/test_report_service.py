"""Unit tests for the report generator."""

import random
from datetime import date
from typing import List
from unittest.mock import AsyncMock, patch

import pytest

from housing_dashboard.core.database.entities import VoucherType
from housing_dashboard.core.database.schemas.reports import ReportFormatting
from housing_dashboard.reporting import ReportGenerationError, ReportGenerator, generate_synthetic_data
from housing_dashboard.reporting.base import ReportWriterResponse
from housing_dashboard.reporting.service import SYNTHETIC_MAX_DAYS
from housing_dashboard.server.core.config import AIConfig

SERVICE = "housing_dashboard.reporting.service"


def ai_config(**overrides) -> AIConfig:
    values = {"use_mock": False, "openai_api_key": "sk-test", "report_model": "test", "mock_chunk_delay": 0.0}
    values.update(overrides)
    return AIConfig(**values)


async def collect(generator: ReportGenerator, report_type: str, records=(), **kwargs) -> List[str]:
    return [chunk async for chunk in generator.stream(report_type, list(records), **kwargs)]


class TestSyntheticData:
    def test_one_row_per_day_and_voucher_type(self):
        rows = generate_synthetic_data(date(2025, 1, 1), date(2025, 1, 4), rng=random.Random(7))

        assert len(rows) == 3 * len(VoucherType)
        assert rows[0]["reportingDate"] == "2025-01-01"
        assert {row["voucherType"] for row in rows} == {member.value for member in VoucherType}

    def test_capped_and_never_empty(self):
        long_range = generate_synthetic_data(date(2024, 1, 1), date(2025, 1, 1))
        same_day = generate_synthetic_data(date(2025, 1, 1), date(2025, 1, 1))

        assert len(long_range) == SYNTHETIC_MAX_DAYS * len(VoucherType)
        assert len(same_day) == len(VoucherType)

    def test_values_are_consistent(self):
        for row in generate_synthetic_data(date(2025, 1, 1), date(2025, 1, 10), rng=random.Random(1)):
            assert 0 <= row["leasedVouchers"] < row["authorizedVouchers"]
            assert row["utilizationRate"] == round(row["leasedVouchers"] / row["authorizedVouchers"] * 100, 2)
            assert row["hapExpenses"] == row["leasedVouchers"] * row["averageHapPerUnit"]


class TestUseMock:
    @pytest.mark.asyncio
    async def test_forced(self):
        assert await ReportGenerator(ai_config(use_mock=True)).use_mock() is True

    @pytest.mark.asyncio
    async def test_missing_key(self):
        assert await ReportGenerator(ai_config(openai_api_key=None)).use_mock() is True

    @pytest.mark.asyncio
    async def test_key_present(self):
        assert await ReportGenerator(ai_config()).use_mock() is False

    @pytest.mark.asyncio
    async def test_dev_bypass_falls_back_when_key_fails(self):
        with patch(f"{SERVICE}.verify_api_key", AsyncMock(return_value=False)) as mock_verify:
            assert await ReportGenerator(ai_config(), dev_bypass=True).use_mock() is True

        mock_verify.assert_awaited_once_with("test", None)

    @pytest.mark.asyncio
    async def test_dev_bypass_with_working_key(self):
        with patch(f"{SERVICE}.verify_api_key", AsyncMock(return_value=True)):
            assert await ReportGenerator(ai_config(), dev_bypass=True).use_mock() is False


class TestGenerate:
    @pytest.mark.asyncio
    async def test_canned_forecast(self):
        text = await ReportGenerator(ai_config(use_mock=True)).generate("budget_forecast", [], forecast_months=8)

        assert "(8-Month Projection)" in text

    @pytest.mark.asyncio
    async def test_model_output(self):
        text = await ReportGenerator(ai_config()).generate("executive_summary", [])

        assert text

    @pytest.mark.asyncio
    async def test_writer_failure(self):
        failed = ReportWriterResponse(content=None, error="boom", success=False)

        with patch(f"{SERVICE}.PydanticAIReportWriter.invoke", AsyncMock(return_value=failed)):
            with pytest.raises(ReportGenerationError, match="Failed to generate voucher type report"):
                await ReportGenerator(ai_config()).generate("voucher_analysis", [], voucher_type="hud_vash")

    @pytest.mark.asyncio
    async def test_empty_output_placeholder(self):
        empty = ReportWriterResponse(content="", success=True)

        with patch(f"{SERVICE}.PydanticAIReportWriter.invoke", AsyncMock(return_value=empty)):
            text = await ReportGenerator(ai_config()).generate("executive_summary", [])

        assert text == "Unable to generate executive summary."

    @pytest.mark.asyncio
    async def test_streaming_only_types_are_rejected(self):
        with pytest.raises(ReportGenerationError, match="Invalid report type"):
            await ReportGenerator(ai_config(use_mock=True)).generate("custom_report", [])

    @pytest.mark.asyncio
    async def test_voucher_analysis_needs_type(self):
        with pytest.raises(ReportGenerationError, match="Voucher type is required"):
            await ReportGenerator(ai_config(use_mock=True)).generate("voucher_analysis", [])


class TestStream:
    @pytest.mark.asyncio
    async def test_canned_chunks(self):
        chunks = await collect(ReportGenerator(ai_config(use_mock=True)), "voucher_analysis", voucher_type="hud_vash")

        assert len(chunks) > 1
        assert "HUD_VASH" in "".join(chunks)

    @pytest.mark.asyncio
    async def test_custom_report_requires_prompt(self):
        with pytest.raises(ReportGenerationError, match="Custom prompt is required"):
            await collect(ReportGenerator(ai_config(use_mock=True)), "custom_report")

    @pytest.mark.asyncio
    async def test_model_prompt_contains_data_formatting_and_style(self):
        captured = {}

        async def fake_stream(self, prompt, **kwargs):
            captured["prompt"] = prompt
            captured["max_tokens"] = self.config.max_tokens
            yield "chunk"

        records = [
            {"reportingDate": "2025-01-31", "voucherType": "hud_vash"},
            {"reportingDate": "2025-01-31", "voucherType": "mainstream"},
        ]
        with patch(f"{SERVICE}.PydanticAIReportWriter.stream", fake_stream):
            chunks = await collect(
                ReportGenerator(ai_config()),
                "voucher_analysis",
                records,
                voucher_type="hud_vash",
                formatting=ReportFormatting(length="brief", tone="conversational"),
                style_content="Use short sentences.",
            )

        assert chunks == ["chunk"]
        assert "data for hud_vash vouchers" in captured["prompt"]
        assert '"voucherType": "hud_vash"' in captured["prompt"]
        assert "mainstream" not in captured["prompt"]
        assert "- Tone: conversational" in captured["prompt"]
        assert "Use short sentences." in captured["prompt"]
        assert captured["max_tokens"] == 500

    @pytest.mark.asyncio
    async def test_writer_errors_become_generation_errors(self):
        async def broken_stream(self, prompt, **kwargs):
            raise ConnectionError("socket closed")
            yield  # pragma: no cover

        with patch(f"{SERVICE}.PydanticAIReportWriter.stream", broken_stream):
            with pytest.raises(ReportGenerationError, match="Failed to generate executive_summary report"):
                await collect(ReportGenerator(ai_config()), "executive_summary")
