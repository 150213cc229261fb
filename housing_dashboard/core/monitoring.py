"""
Monitoring and Tracing Configuration Module.

This module integrates Pydantic Logfire for tracing of the dashboard backend:
- API endpoint traces and request latency
- Database operation spans
- Report writer (pydantic-ai) model calls
- Outbound HTTP calls

Every helper degrades to debug logging when Logfire is disabled, not
installed or not configured, so callers never need to check.
"""

import logging
import os
from typing import Optional

from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


# Logfire configuration from environment
LOGFIRE_ENABLED = _flag("LOGFIRE_ENABLED", "false")
LOGFIRE_TOKEN = os.getenv("LOGFIRE_TOKEN", "")
LOGFIRE_PROJECT_NAME = os.getenv("LOGFIRE_PROJECT_NAME", "housing-dashboard")
LOGFIRE_ENVIRONMENT = os.getenv("LOGFIRE_ENVIRONMENT", "development")
LOGFIRE_SERVICE_NAME = os.getenv("LOGFIRE_SERVICE_NAME", "housing-dashboard-api")
LOGFIRE_SERVICE_VERSION = os.getenv("LOGFIRE_SERVICE_VERSION", "1.0.0")

# Sampling configuration
LOGFIRE_SAMPLE_RATE = float(os.getenv("LOGFIRE_SAMPLE_RATE", "1.0"))

# Feature flags
LOGFIRE_TRACE_PYDANTIC_AI = _flag("LOGFIRE_TRACE_PYDANTIC_AI", "true")
LOGFIRE_TRACE_SQLALCHEMY = _flag("LOGFIRE_TRACE_SQLALCHEMY", "true")
LOGFIRE_TRACE_HTTPX = _flag("LOGFIRE_TRACE_HTTPX", "true")
LOGFIRE_TRACE_FASTAPI = _flag("LOGFIRE_TRACE_FASTAPI", "true")


def initialize_logfire(app: Optional[FastAPI] = None) -> bool:
    """
    Initialize Logfire for monitoring and tracing.

    Instrumentation is enabled per integration through the LOGFIRE_TRACE_*
    flags. A failure to instrument one integration is logged and does not stop
    the others.

    Args:
        app: FastAPI application instance to instrument (optional)

    Returns:
        True when Logfire was configured
    """
    if not LOGFIRE_ENABLED:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not LOGFIRE_TOKEN:
        logger.warning("Logfire is enabled but LOGFIRE_TOKEN is not set; monitoring stays off.")
        return False

    try:
        import logfire
        from logfire import SamplingOptions

        logfire.configure(
            token=LOGFIRE_TOKEN,
            service_name=LOGFIRE_SERVICE_NAME,
            service_version=LOGFIRE_SERVICE_VERSION,
            environment=LOGFIRE_ENVIRONMENT,
            sampling=SamplingOptions(head=LOGFIRE_SAMPLE_RATE),
        )

        integrations = (
            ("Pydantic AI", LOGFIRE_TRACE_PYDANTIC_AI, logfire.instrument_pydantic_ai, {}),
            ("SQLAlchemy", LOGFIRE_TRACE_SQLALCHEMY, logfire.instrument_sqlalchemy, {}),
            ("HTTPX", LOGFIRE_TRACE_HTTPX, logfire.instrument_httpx, {}),
            ("FastAPI", LOGFIRE_TRACE_FASTAPI and app is not None, logfire.instrument_fastapi, {"app": app}),
        )
        for name, enabled, instrument, kwargs in integrations:
            if not enabled:
                continue
            try:
                instrument(**kwargs)
                logger.info(f"Logfire: {name} instrumentation enabled")
            except Exception as e:
                logger.warning(f"Failed to instrument {name}: {e}")

        logger.info(
            f"Logfire monitoring initialized: project={LOGFIRE_PROJECT_NAME}, "
            f"environment={LOGFIRE_ENVIRONMENT}, service={LOGFIRE_SERVICE_NAME}"
        )
        return True
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False


def _forward(level: str, message: str, **fields) -> bool:
    """Send one structured record to Logfire; False when it could not be sent."""
    try:
        import logfire

        getattr(logfire, level)(message, **fields)
        return True
    except Exception:
        return False


def log_api_request(method: str, path: str, status_code: int, duration_ms: float) -> None:
    """Record the outcome and latency of one dashboard API call."""
    if not _forward(
        "info", "API request completed", method=method, path=path, status_code=status_code, duration_ms=duration_ms
    ):
        logger.debug(f"{method} {path} -> {status_code} in {duration_ms:.1f}ms")


def log_report_generation(report_type: str, chunks: int, duration_ms: float, mock: bool = False) -> None:
    """
    Record a finished report.

    Args:
        report_type: Report type identifier
        chunks: Number of streamed chunks (1 for non-streaming reports)
        duration_ms: Generation time in milliseconds
        mock: Whether the canned writer produced the report
    """
    if not _forward(
        "info", "Report generated", report_type=report_type, chunks=chunks, duration_ms=duration_ms, mock=mock
    ):
        logger.debug(f"{report_type} report: {chunks} chunks in {duration_ms:.1f}ms (mock={mock})")


def log_error(error_type: str, error_message: str, context: Optional[dict] = None) -> None:
    """Record a handled or unhandled error together with its request or report context."""
    if not _forward("error", f"{error_type}: {error_message}", **(context or {})):
        logger.debug(f"{error_type}: {error_message} {context or {}}")
