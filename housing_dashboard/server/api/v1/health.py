"""
Liveness and version endpoints.

Both routes are open so load balancers and deploy scripts can probe the
dashboard without a token.
"""

from fastapi import APIRouter

from housing_dashboard.server.services.deps import SettingsDep

router = APIRouter()


@router.get("/health", summary="Liveness probe")
async def health_check():
    return {"status": "ok", "message": "Server is running"}


@router.get("/version", summary="Dashboard name and release")
async def version(app_settings: SettingsDep):
    """Name and version as configured through ``PROJECT_NAME`` and ``VERSION``."""
    return {"name": app_settings.project_name, "version": app_settings.version}
