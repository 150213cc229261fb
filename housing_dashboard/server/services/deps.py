"""
API Dependencies.

Provides the repository bundle, the application settings and the
authentication dependencies used by the API endpoints.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from housing_dashboard.core.database import get_session
from housing_dashboard.core.database.entities import User, UserRole
from housing_dashboard.core.database.repositories import RepositoryBundle, build_repositories
from housing_dashboard.core.logging_config import get_logger
from housing_dashboard.server.core.config import Settings, settings

from .security import InvalidTokenError, decode_access_token

logger = get_logger(__name__)

DEV_ADMIN_ID = "dev-admin"
DEV_ADMIN_EMAIL = "dev@example.com"

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings() -> Settings:
    return settings


async def get_repositories(session: AsyncSession = Depends(get_session)) -> RepositoryBundle:
    """Repositories bound to the request's database session."""
    return build_repositories(session=session)


SettingsDep = Annotated[Settings, Depends(get_settings)]
ReposDep = Annotated[RepositoryBundle, Depends(get_repositories)]


def dev_admin() -> User:
    """The built-in administrator used while authentication is bypassed; never persisted."""
    return User(
        id=DEV_ADMIN_ID,
        first_name="Dev",
        last_name="Admin",
        email=DEV_ADMIN_EMAIL,
        password="",
        role=UserRole.ADMIN.value,
        is_active=True,
    )


async def get_current_user(
    repos: ReposDep,
    app_settings: SettingsDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    """
    Resolve the authenticated user from the ``Authorization: Bearer`` header.

    In development with ``BYPASS_AUTH`` enabled, the built-in administrator is
    returned without looking at the header or the database.

    Raises:
        HTTPException: 401 when the header is missing, the token is invalid or
            the user is unknown or inactive
    """
    if app_settings.is_dev_bypass:
        return dev_admin()

    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required. Please log in.")

    try:
        claims = decode_access_token(credentials.credentials, app_settings.auth)
    except InvalidTokenError as e:
        logger.debug(f"Rejected access token: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    user = await repos.users.get_by_id(claims["id"])
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


async def require_admin(user: CurrentUserDep) -> User:
    if user.role != UserRole.ADMIN.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied. Admin privileges required.")
    return user


async def require_writer(user: CurrentUserDep) -> User:
    """Allow administrators and regular users; read-only users are rejected."""
    if user.role not in (UserRole.ADMIN.value, UserRole.USER.value):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied. User privileges required.")
    return user


AdminDep = Annotated[User, Depends(require_admin)]
WriterDep = Annotated[User, Depends(require_writer)]
