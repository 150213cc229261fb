"""
Core utilities and configuration for the Housing Authority Dashboard.

This package provides core functionality including logging configuration,
monitoring, database setup, and other shared utilities.
"""

from housing_dashboard.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
