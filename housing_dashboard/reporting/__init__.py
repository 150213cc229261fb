"""
Report generation.

Reports are written by a ``ReportWriterBase`` implementation: the pydantic-ai
adapter talks to a hosted model, the mock adapter serves canned markdown.
``ReportGenerator`` picks the writer, builds prompts and streams the output.
"""

from .base import ReportGenerationError, ReportWriterBase, ReportWriterConfig, ReportWriterResponse
from .service import ReportGenerator, generate_synthetic_data

__all__ = [
    "ReportGenerationError",
    "ReportGenerator",
    "ReportWriterBase",
    "ReportWriterConfig",
    "ReportWriterResponse",
    "generate_synthetic_data",
]
