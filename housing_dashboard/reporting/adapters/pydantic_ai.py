"""Pydantic AI report writer adapter.

This module implements ReportWriterBase on top of a pydantic-ai ``Agent``.
The agent is created per writer; the model is resolved by pydantic-ai from
the model identifier and reads its API key from the environment.
"""

from typing import Any, AsyncIterator, Dict, Optional

from housing_dashboard.core.logging_config import get_logger

from ..base import ReportWriterBase, ReportWriterConfig, ReportWriterResponse

logger = get_logger(__name__)

# Verification results per model identifier, kept for the process lifetime
_verified_models: Dict[str, bool] = {}


class PydanticAIReportWriter(ReportWriterBase):
    """Report writer backed by a pydantic-ai Agent."""

    def __init__(self, config: ReportWriterConfig) -> None:
        super().__init__(config)
        self._agent = None

    def build_init_kwargs(self) -> Dict[str, Any]:
        """Build the keyword arguments of the pydantic-ai ``Agent`` constructor.

        Returns:
            Dictionary of kwargs for Agent constructor
        """
        kwargs: Dict[str, Any] = {"model": self._config.model}

        if self._config.system_prompt:
            kwargs["system_prompt"] = self._config.system_prompt

        model_settings: Dict[str, Any] = {"temperature": self._config.temperature}
        if self._config.max_tokens is not None:
            model_settings["max_tokens"] = self._config.max_tokens
        if self._config.timeout is not None:
            model_settings["timeout"] = self._config.timeout
        kwargs["model_settings"] = model_settings

        if self._config.metadata:
            kwargs.update(self._config.metadata)

        logger.debug(f"Built initialization kwargs for {self._config.name}: {list(kwargs.keys())}")
        return kwargs

    async def initialize(self) -> None:
        """Create the underlying Agent.

        Raises:
            RuntimeError: If the agent cannot be created (unknown model, missing key)
        """
        try:
            from pydantic_ai import Agent

            self._agent = Agent(**self.build_init_kwargs())
            self._initialized = True
            logger.debug(f"Pydantic AI report writer initialized: {self._config.name} ({self._config.model})")
        except Exception as e:
            raise RuntimeError(f"Failed to initialize report writer: {e}") from e

    async def invoke(self, prompt: str, **kwargs: Any) -> ReportWriterResponse:
        if not self._initialized or self._agent is None:
            raise RuntimeError("Report writer not initialized. Call initialize() first.")

        try:
            logger.debug(f"Invoking report writer {self._config.name} with prompt length {len(prompt)}")
            result = await self._agent.run(prompt)
        except Exception as e:
            logger.error(f"Report writer invocation failed: {self._config.name}: {e}", exc_info=True)
            return ReportWriterResponse(content=None, error=str(e), success=False)

        metadata: Dict[str, Any] = {"model": self._config.model, "framework": "pydantic_ai"}
        if hasattr(result, "usage"):
            metadata["usage"] = run_usage(result)
        return ReportWriterResponse(content=result.output, metadata=metadata, success=True)

    async def stream(self, prompt: str, **kwargs: Any) -> AsyncIterator[str]:
        if not self._initialized or self._agent is None:
            raise RuntimeError("Report writer not initialized. Call initialize() first.")

        logger.debug(f"Streaming from report writer {self._config.name}")
        try:
            async with self._agent.run_stream(prompt) as result:
                async for delta in result.stream_text(delta=True):
                    if delta:
                        yield delta
        except Exception as e:
            logger.error(f"Report writer streaming failed: {self._config.name}: {e}", exc_info=True)
            raise

    async def cleanup(self) -> None:
        logger.debug(f"Cleaning up report writer: {self._config.name}")
        self._agent = None
        self._initialized = False


def run_usage(result: Any) -> Dict[str, Any]:
    """Token counts of a finished run.

    ``usage`` is a method on pydantic-ai 1.x results and a property on later releases.
    """
    usage = result.usage
    if callable(usage):
        usage = usage()
    return {
        "input_tokens": getattr(usage, "input_tokens", None),
        "output_tokens": getattr(usage, "output_tokens", None),
    }


async def verify_api_key(model: str, timeout: Optional[float] = None) -> bool:
    """Check once per model that the configured credentials can generate text.

    A tiny prompt is sent on first use; the outcome is cached for the process.

    Args:
        model: pydantic-ai model identifier
        timeout: Optional request timeout in seconds

    Returns:
        True when the model answered with non-empty text
    """
    if model in _verified_models:
        return _verified_models[model]

    writer = PydanticAIReportWriter(
        ReportWriterConfig(name="api-key-check", model=model, max_tokens=5, timeout=timeout)
    )
    try:
        async with writer:
            response = await writer.invoke("Hello")
        valid = bool(response.success and response.content)
    except RuntimeError as e:
        logger.error(f"Report model verification failed for {model}: {e}")
        valid = False

    if valid:
        logger.info(f"Report model credentials verified: {model}")
    else:
        logger.warning(f"Report model credentials could not be verified: {model}")
    _verified_models[model] = valid
    return valid


def reset_verification_cache() -> None:
    """Forget cached verification results."""
    _verified_models.clear()
