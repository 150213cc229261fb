"""
Housing Authority Dashboard Server Package.

This package contains the web server of the dashboard.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Application settings.
    exception_handlers: Handlers for unhandled errors.
    middleware: Request timing and monitoring.
    services: Authentication dependencies, token handling and PDF export.
"""
