"""
Style template entity models.

A style template stores the extracted text of a writing sample that guides the
tone and structure of generated reports.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Text
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class StyleTemplateBase(Base):
    """Base fields for style template entity."""

    name: str = Field(max_length=255, description="Display name")
    content: str = Field(sa_type=Text, description="Extracted template text")
    category: str = Field(default="general", max_length=50, description="Template category")


class StyleTemplate(StyleTemplateBase, table=True):
    """Entity for report writing style templates.

    Table: style_templates
    """

    __tablename__ = "style_templates"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)

    created_at: datetime = Field(default_factory=utc_now, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True), sa_column_kwargs={"onupdate": utc_now}
    )

    def __repr__(self) -> str:
        return f"StyleTemplate(id={self.id}, name={self.name})"
