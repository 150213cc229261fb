"""Unit tests for the report writer adapters.

The pydantic-ai adapter runs against pydantic-ai's built-in ``test`` model so
no network access is needed.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from housing_dashboard.reporting.adapters import (
    MockReportWriter,
    PydanticAIReportWriter,
    reset_verification_cache,
    verify_api_key,
)
from housing_dashboard.reporting.adapters.pydantic_ai import run_usage
from housing_dashboard.reporting.base import ReportWriterConfig


@pytest.fixture(autouse=True)
def _fresh_verification_cache():
    reset_verification_cache()
    yield
    reset_verification_cache()


class TestMockReportWriter:
    @pytest.mark.asyncio
    async def test_invoke_returns_content(self):
        writer = MockReportWriter(ReportWriterConfig(name="mock"), content="# Report")

        async with writer:
            assert writer.is_initialized
            response = await writer.invoke("ignored")

        assert response.success
        assert response.content == "# Report"
        assert not writer.is_initialized
        assert writer.is_mock

    @pytest.mark.asyncio
    async def test_stream_splits_content(self):
        writer = MockReportWriter(ReportWriterConfig(name="mock"), content="one\n\ntwo")

        chunks = [chunk async for chunk in writer.stream("")]

        assert chunks == ["one\n\n", "two\n\n"]

    @pytest.mark.asyncio
    async def test_explicit_chunks_with_delay(self):
        writer = MockReportWriter(ReportWriterConfig(name="mock"), content="", chunks=["a", "b"], chunk_delay=0.01)

        with patch("housing_dashboard.reporting.adapters.mock.asyncio.sleep") as mock_sleep:
            chunks = [chunk async for chunk in writer.stream("")]

        assert chunks == ["a", "b"]
        mock_sleep.assert_called_once_with(0.01)


class TestPydanticAIReportWriter:
    def test_init_kwargs(self):
        config = ReportWriterConfig(
            name="forecast",
            model="openai:gpt-4",
            system_prompt="You are an analyst",
            temperature=0.7,
            max_tokens=1000,
            timeout=30,
        )

        kwargs = PydanticAIReportWriter(config).build_init_kwargs()

        assert kwargs["model"] == "openai:gpt-4"
        assert kwargs["system_prompt"] == "You are an analyst"
        assert kwargs["model_settings"] == {"temperature": 0.7, "max_tokens": 1000, "timeout": 30}

    def test_init_kwargs_without_optional_settings(self):
        kwargs = PydanticAIReportWriter(ReportWriterConfig(name="plain", model="test")).build_init_kwargs()

        assert "system_prompt" not in kwargs
        assert kwargs["model_settings"] == {"temperature": 0.5}

    @pytest.mark.asyncio
    async def test_invoke_before_initialize(self):
        writer = PydanticAIReportWriter(ReportWriterConfig(name="early", model="test"))

        with pytest.raises(RuntimeError, match="not initialized"):
            await writer.invoke("hello")

    @pytest.mark.asyncio
    async def test_initialize_failure(self):
        writer = PydanticAIReportWriter(ReportWriterConfig(name="bad", model="test"))

        with patch("pydantic_ai.Agent", side_effect=ValueError("unknown model")):
            with pytest.raises(RuntimeError, match="Failed to initialize report writer"):
                await writer.initialize()

    @pytest.mark.asyncio
    async def test_invoke_with_test_model(self):
        async with PydanticAIReportWriter(ReportWriterConfig(name="t", model="test")) as writer:
            response = await writer.invoke("Summarize utilization")

        assert response.success
        assert response.content
        assert response.metadata["framework"] == "pydantic_ai"
        assert response.metadata["usage"]["input_tokens"] > 0

    @pytest.mark.asyncio
    async def test_invoke_failure_is_reported(self):
        writer = PydanticAIReportWriter(ReportWriterConfig(name="t", model="test"))
        await writer.initialize()
        writer._agent = MagicMock()
        writer._agent.run.side_effect = RuntimeError("rate limited")

        response = await writer.invoke("hello")

        assert response.success is False
        assert response.error == "rate limited"

    @pytest.mark.asyncio
    async def test_stream_with_test_model(self):
        async with PydanticAIReportWriter(ReportWriterConfig(name="t", model="test")) as writer:
            chunks = [chunk async for chunk in writer.stream("Summarize utilization")]

        assert chunks
        assert all(chunks)


class TestRunUsage:
    def test_usage_property(self):
        result = MagicMock(spec=["usage"])
        result.usage = SimpleNamespace(input_tokens=12, output_tokens=30)

        assert run_usage(result) == {"input_tokens": 12, "output_tokens": 30}

    def test_usage_method(self):
        result = MagicMock(spec=["usage"])
        result.usage = MagicMock(return_value=SimpleNamespace(input_tokens=5, output_tokens=7))

        assert run_usage(result) == {"input_tokens": 5, "output_tokens": 7}


class TestVerifyApiKey:
    @pytest.mark.asyncio
    async def test_test_model_verifies(self):
        assert await verify_api_key("test") is True

    @pytest.mark.asyncio
    async def test_result_is_cached(self):
        with patch.object(PydanticAIReportWriter, "invoke") as mock_invoke:
            mock_invoke.return_value.success = False
            assert await verify_api_key("test") is False
            assert await verify_api_key("test") is False

        mock_invoke.assert_called_once()

    @pytest.mark.asyncio
    async def test_initialization_error_means_invalid(self):
        with patch("pydantic_ai.Agent", side_effect=ValueError("no key")):
            assert await verify_api_key("openai:gpt-4") is False
