"""Report writer adapters."""

from .mock import MockReportWriter
from .pydantic_ai import PydanticAIReportWriter, reset_verification_cache, verify_api_key

__all__ = ["MockReportWriter", "PydanticAIReportWriter", "reset_verification_cache", "verify_api_key"]
