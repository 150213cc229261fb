"""
Database schema models for API requests and responses.

This package contains Pydantic-based schema models for API serialization and
deserialization. They are separate from the entity models so that the wire
format (camelCase) can evolve independently of the table layout.
"""

from . import budget, commitments, expenditures, hcv_utilization, imports, reports, style_templates, users

__all__ = [
    "budget",
    "commitments",
    "expenditures",
    "hcv_utilization",
    "imports",
    "reports",
    "style_templates",
    "users",
]
