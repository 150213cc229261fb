"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware
(request timing, CORS), registers exception handlers and includes all API
routers under the versioned API prefix.
"""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv()

from housing_dashboard.core.database import init_db  # noqa: E402
from housing_dashboard.core.logging_config import get_logger, setup_logging  # noqa: E402
from housing_dashboard.core.monitoring import initialize_logfire  # noqa: E402

from .api.v1 import (  # noqa: E402
    auth,
    budget,
    commitments,
    expenditures,
    hcv_utilization,
    health,
    imports,
    reports,
    uploads,
    users,
)
from .core.config import settings  # noqa: E402
from .exception_handlers import setup_exception_handlers  # noqa: E402
from .middleware import RequestTimingMiddleware  # noqa: E402

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates the tables on startup in development and test environments;
    production schemas are owned by Alembic.
    """
    try:
        logger.info(f"Starting up {settings.project_name} ({settings.environment})...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    if settings.is_dev_bypass:
        logger.warning("Authentication is bypassed: every request acts as the built-in admin")

    yield

    logger.info(f"Shutting down {settings.project_name}...")


app = FastAPI(
    title=settings.project_name,
    description="""
    Housing Authority Dashboard API

    Budget authorities, MTW reserves, HAP expenditures, commitments and Housing
    Choice Voucher utilization, with spreadsheet imports and generated reports.
    """,
    version=settings.version,
    openapi_url=f"{settings.api_v1_str}/openapi.json",
    docs_url=f"{settings.api_v1_str}/docs",
    redoc_url=f"{settings.api_v1_str}/redoc",
    lifespan=lifespan,
)

setup_exception_handlers(app)

app.add_middleware(RequestTimingMiddleware)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

initialize_logfire(app)

prefix = settings.api_v1_str
app.include_router(health.router, prefix=prefix, tags=["health"])
app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])
app.include_router(users.router, prefix=f"{prefix}/users", tags=["users"])
app.include_router(budget.router, prefix=f"{prefix}/budget", tags=["budget"])
app.include_router(commitments.router, prefix=f"{prefix}/commitments", tags=["commitments"])
app.include_router(expenditures.router, prefix=f"{prefix}/expenditures", tags=["expenditures"])
app.include_router(hcv_utilization.router, prefix=f"{prefix}/hcv-utilization", tags=["hcv-utilization"])
app.include_router(imports.router, prefix=f"{prefix}/import", tags=["import"])
app.include_router(uploads.router, prefix=f"{prefix}/upload", tags=["upload"])
app.include_router(reports.router, prefix=f"{prefix}/reports", tags=["reports"])


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.server_host, port=settings.server_port)
