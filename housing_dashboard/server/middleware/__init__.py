"""
Middleware modules for the dashboard server.

This package contains custom middleware for request timing and monitoring.
"""

from .request_timing import RequestTimingMiddleware

__all__ = ["RequestTimingMiddleware"]
