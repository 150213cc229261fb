"""
Global Exception Handler for FastAPI Application.

Expected failures are raised as ``HTTPException`` by the endpoints. Anything
else reaching the application boundary is logged with its request context
and answered with a 500 carrying an error ID that clients can quote.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from housing_dashboard.core.logging_config import get_logger
from housing_dashboard.core.monitoring import log_error

logger = get_logger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log an unhandled exception and return a generic 500 response.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with ``detail``, ``error_id`` and ``error_type``
    """
    error_id = id(exc)
    error_type = type(exc).__name__

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {exc}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": error_type,
            "traceback": traceback.format_exc(),
        },
    )
    log_error(error_type=error_type, error_message=str(exc), context={"path": request.url.path})

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": error_type,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the FastAPI application."""
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")
