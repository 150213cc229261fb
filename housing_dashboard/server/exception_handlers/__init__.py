"""
Exception handlers for the dashboard server.

This package contains the handler for unhandled exceptions and a setup
function to register it with the FastAPI application.
"""

from .global_handler import setup_exception_handlers

__all__ = ["setup_exception_handlers"]
