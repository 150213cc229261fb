"""Mock report writer adapter.

Serves a fixed markdown text instead of calling a model. Streaming yields the
text chunk by chunk with an optional delay between chunks.
"""

import asyncio
from typing import Any, AsyncIterator, List, Optional

from housing_dashboard.core.logging_config import get_logger

from ..base import ReportWriterBase, ReportWriterConfig, ReportWriterResponse
from ..mock_reports import split_chunks

logger = get_logger(__name__)


class MockReportWriter(ReportWriterBase):
    """Report writer returning canned content.

    Args:
        config: Writer configuration; only ``name`` is used
        content: Canned report text
        chunks: Explicit streaming chunks; defaults to ``content`` split on blank lines
        chunk_delay: Seconds to wait between streamed chunks
    """

    def __init__(
        self,
        config: ReportWriterConfig,
        content: str,
        chunks: Optional[List[str]] = None,
        chunk_delay: float = 0.0,
    ) -> None:
        super().__init__(config)
        self._content = content
        self._chunks = chunks if chunks is not None else split_chunks(content)
        self._chunk_delay = chunk_delay

    @property
    def is_mock(self) -> bool:
        return True

    @property
    def chunks(self) -> List[str]:
        return list(self._chunks)

    async def initialize(self) -> None:
        self._initialized = True
        logger.debug(f"Mock report writer ready: {self._config.name} ({len(self._chunks)} chunks)")

    async def invoke(self, prompt: str, **kwargs: Any) -> ReportWriterResponse:
        return ReportWriterResponse(content=self._content, metadata={"model": "mock", "framework": "mock"})

    async def stream(self, prompt: str, **kwargs: Any) -> AsyncIterator[str]:
        for index, chunk in enumerate(self._chunks):
            if index and self._chunk_delay:
                await asyncio.sleep(self._chunk_delay)
            yield chunk

    async def cleanup(self) -> None:
        self._initialized = False
