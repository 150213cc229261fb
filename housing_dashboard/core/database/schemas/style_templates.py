"""
Schema models for style template API responses.
"""

from __future__ import annotations

from datetime import datetime

from .base import CamelModel


class StyleTemplateSummary(CamelModel):
    """Schema for listing style templates without their content."""

    id: str
    name: str
    created_at: datetime


class StyleTemplateCreated(CamelModel):
    id: str
    name: str
