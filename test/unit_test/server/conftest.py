from typing import AsyncGenerator, Callable, Dict, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from housing_dashboard.core.database.entities import User, UserRole
from housing_dashboard.server.core.config import Settings, settings
from housing_dashboard.server.services.security import create_access_token, hash_password

TEST_PASSWORD = "password123"


@pytest.fixture
def app_settings(tmp_path) -> Settings:
    """Settings served to the endpoints; tests may change fields freely."""
    return settings.model_copy(
        update={
            "environment": "test",
            "bypass_auth": False,
            "report_use_mock": True,
            "report_mock_chunk_delay": 0.0,
            "upload_dir": str(tmp_path / "uploads"),
        }
    )


@pytest_asyncio.fixture(name="client")
async def client_fixture(session: AsyncSession, app_settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """An async HTTP client against the app with the test database and settings."""
    from housing_dashboard.core.database import get_session
    from housing_dashboard.server.main import app
    from housing_dashboard.server.services.deps import get_settings

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_settings] = lambda: app_settings

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session: AsyncSession) -> Callable:
    """Factory persisting a user with the given role and ``TEST_PASSWORD``."""

    async def _make_user(role: str = UserRole.USER.value, email: Optional[str] = None, is_active: bool = True) -> User:
        user = User(
            first_name="Test",
            last_name=role.capitalize(),
            email=email or f"{role}@example.com",
            password=hash_password(TEST_PASSWORD),
            role=role,
            is_active=is_active,
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _make_user


def bearer(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email, user.role, settings.auth)}"}


@pytest_asyncio.fixture
async def admin_user(make_user) -> User:
    return await make_user(UserRole.ADMIN.value)


@pytest_asyncio.fixture
async def admin_headers(admin_user: User) -> Dict[str, str]:
    return bearer(admin_user)


@pytest_asyncio.fixture
async def user_headers(make_user) -> Dict[str, str]:
    return bearer(await make_user(UserRole.USER.value))


@pytest_asyncio.fixture
async def readonly_headers(make_user) -> Dict[str, str]:
    return bearer(await make_user(UserRole.READONLY.value))


@pytest.fixture
def headers_for() -> Callable[[User], Dict[str, str]]:
    """Build bearer headers for an arbitrary user."""
    return bearer
