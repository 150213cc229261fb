"""Base abstraction for report writers.

This module defines the interface every report writer implements, so that the
report generator can switch between a hosted LLM and canned reports without
knowing which one it talks to.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReportGenerationError(RuntimeError):
    """Raised when a report cannot be produced.

    The message is safe to show to API clients.
    """


class ReportWriterConfig(BaseModel):
    """Configuration for initializing a report writer.

    Attributes:
        name: Identifier of the writer instance, used in logs
        model: pydantic-ai model identifier (e.g. 'openai:gpt-4', 'test')
        system_prompt: Optional system instructions
        temperature: Sampling temperature
        max_tokens: Maximum tokens to generate
        timeout: Request timeout in seconds
        metadata: Extra keyword arguments for the underlying framework
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    name: str = Field(..., description="Identifier of the writer instance")
    model: str = Field(default="openai:gpt-4", description="Model identifier")
    system_prompt: Optional[str] = Field(None, description="System instructions for the writer")
    temperature: float = Field(default=0.5, ge=0, le=2, description="Sampling temperature")
    max_tokens: Optional[int] = Field(None, ge=1, description="Maximum tokens to generate")
    timeout: Optional[float] = Field(None, description="Request timeout in seconds")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Framework-specific options")


class ReportWriterResponse(BaseModel):
    """Response of a report writer.

    Attributes:
        content: Generated report text
        metadata: Usage and model information
        error: Error message if the request failed
        success: Whether the request succeeded
    """

    content: Optional[str] = Field(None, description="Generated report text")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Response metadata")
    error: Optional[str] = Field(None, description="Error message if the request failed")
    success: bool = Field(default=True, description="Whether the request succeeded")


class ReportWriterBase(ABC):
    """Abstract base class for report writers.

    Subclasses must implement:
    - initialize(): Prepare the writer
    - invoke(): Produce a whole report
    - stream(): Produce a report chunk by chunk
    - cleanup(): Release resources
    """

    def __init__(self, config: ReportWriterConfig) -> None:
        self._config = config
        self._initialized = False

    @property
    def config(self) -> ReportWriterConfig:
        return self._config

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def is_mock(self) -> bool:
        """Whether the writer serves canned content."""
        return False

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the writer.

        Raises:
            RuntimeError: If initialization fails
        """

    @abstractmethod
    async def invoke(self, prompt: str, **kwargs: Any) -> ReportWriterResponse:
        """Generate a complete report.

        Args:
            prompt: Full prompt text
            **kwargs: Writer-specific parameters

        Returns:
            ReportWriterResponse with the generated text or the error
        """

    @abstractmethod
    def stream(self, prompt: str, **kwargs: Any) -> AsyncIterator[str]:
        """Generate a report as an async iterator of text chunks.

        Args:
            prompt: Full prompt text
            **kwargs: Writer-specific parameters

        Yields:
            Text chunks in generation order
        """

    @abstractmethod
    async def cleanup(self) -> None:
        """Release writer resources."""

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.cleanup()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self._config.name}, model={self._config.model})"
