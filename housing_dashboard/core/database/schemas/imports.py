"""
Schema models for import and upload results.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class RowError(CamelModel):
    row: int = Field(description="1-based data row number")
    error: str


class ImportSummary(CamelModel):
    success: int = 0
    errors: List[RowError] = Field(default_factory=list)


class ImportResponse(CamelModel):
    """Response of the strict import endpoint."""

    message: str = "File processed successfully"
    data: ImportSummary


class IngestionResult(CamelModel):
    """Result of tolerant utilization ingestion."""

    imported: int = 0
    errors: List[RowError] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class UploadResponse(CamelModel):
    message: str
    data: Optional[dict] = None
