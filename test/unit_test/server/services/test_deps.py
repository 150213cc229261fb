"""Unit tests for the authentication dependencies.

The role checks are exercised through the endpoints elsewhere; these tests
cover token resolution and the development bypass directly.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from housing_dashboard.core.database.entities import UserRole
from housing_dashboard.server.core.config import settings
from housing_dashboard.server.services.deps import (
    DEV_ADMIN_ID,
    ReposDep,
    SettingsDep,
    dev_admin,
    get_current_user,
    get_repositories,
    get_settings,
    require_admin,
    require_writer,
)
from housing_dashboard.server.services.security import create_access_token


def credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestAnnotatedDependencies:
    def test_settings_dep(self):
        assert SettingsDep.__metadata__[0].dependency == get_settings

    def test_repos_dep(self):
        assert ReposDep.__metadata__[0].dependency == get_repositories


class TestGetCurrentUser:
    async def test_dev_bypass_returns_builtin_admin(self, repos):
        bypass = settings.model_copy(update={"environment": "development", "bypass_auth": True})

        user = await get_current_user(repos, bypass, None)

        assert user.id == DEV_ADMIN_ID
        assert user.role == UserRole.ADMIN.value

    async def test_bypass_ignored_outside_development(self, repos):
        production = settings.model_copy(update={"environment": "production", "bypass_auth": True})

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(repos, production, None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Authentication required. Please log in."

    async def test_invalid_token(self, repos):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(repos, settings, credentials("garbage"))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid or expired token"

    async def test_unknown_user(self, repos):
        token = create_access_token("missing", "m@example.com", "user", settings.auth)

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(repos, settings, credentials(token))

        assert exc_info.value.detail == "User not found or inactive"

    async def test_inactive_user(self):
        inactive = dev_admin()
        inactive.is_active = False
        repos = AsyncMock()
        repos.users.get_by_id = AsyncMock(return_value=inactive)
        token = create_access_token(inactive.id, inactive.email, inactive.role, settings.auth)

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(repos, settings, credentials(token))

        assert exc_info.value.status_code == 401
        repos.users.get_by_id.assert_awaited_once_with(inactive.id)


class TestRoleChecks:
    async def test_admin_passes_both(self):
        admin = dev_admin()

        assert await require_admin(admin) is admin
        assert await require_writer(admin) is admin

    async def test_readonly_rejected_by_writer_check(self):
        readonly = dev_admin()
        readonly.role = UserRole.READONLY.value

        with pytest.raises(HTTPException) as exc_info:
            await require_writer(readonly)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "Access denied. User privileges required."

    async def test_user_rejected_by_admin_check(self):
        user = dev_admin()
        user.role = UserRole.USER.value

        with pytest.raises(HTTPException) as exc_info:
            await require_admin(user)

        assert exc_info.value.detail == "Access denied. Admin privileges required."
