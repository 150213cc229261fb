"""Unit tests for the application settings model.

Tests verify environment variable binding and the grouped configuration
objects derived from the flat settings.
"""

from datetime import timedelta

import pytest

from housing_dashboard.server.core.config import (
    AIConfig,
    AuthConfig,
    CORSConfig,
    Settings,
    UploadConfig,
    parse_duration,
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove the variables pinned by the test suite so defaults show through."""
    pinned = ("ENVIRONMENT", "BYPASS_AUTH", "REPORT_USE_MOCK", "REPORT_MOCK_CHUNK_DELAY", "JWT_SECRET", "UPLOAD_DIR")
    for name in pinned:
        monkeypatch.delenv(name, raising=False)


class TestParseDuration:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("3600", timedelta(hours=1)),
            ("45s", timedelta(seconds=45)),
            ("30m", timedelta(minutes=30)),
            ("12h", timedelta(hours=12)),
            ("1d", timedelta(days=1)),
            (" 2D ", timedelta(days=2)),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "1w", "ten minutes", "-5m"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


class TestSettingsBinding:
    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.environment == "development"
        assert settings.api_v1_str == "/api/v1"
        assert settings.server_port == 5000
        assert settings.jwt_expires_in == "1d"
        assert settings.max_upload_size == 10 * 1024 * 1024
        assert settings.report_model == "openai:gpt-4"

    def test_environment_binding(self, monkeypatch):
        monkeypatch.setenv("SERVER_PORT", "8080")
        monkeypatch.setenv("JWT_EXPIRES_IN", "12h")
        monkeypatch.setenv("MAX_UPLOAD_SIZE", "1024")
        monkeypatch.setenv("CORS_ORIGINS", '["https://dashboard.example.org"]')

        settings = Settings(_env_file=None)

        assert settings.server_port == 8080
        assert settings.auth.token_lifetime == timedelta(hours=12)
        assert settings.upload.max_upload_size == 1024
        assert settings.cors.origins == ["https://dashboard.example.org"]

    @pytest.mark.parametrize(
        "environment, bypass, expected",
        [("development", True, True), ("development", False, False), ("production", True, False)],
    )
    def test_dev_bypass(self, monkeypatch, environment, bypass, expected):
        monkeypatch.setenv("ENVIRONMENT", environment)
        monkeypatch.setenv("BYPASS_AUTH", str(bypass).lower())

        assert Settings(_env_file=None).is_dev_bypass is expected


class TestGroupedConfigs:
    def test_groups_mirror_flat_values(self):
        settings = Settings(_env_file=None).model_copy(
            update={"jwt_secret": "s", "report_use_mock": True, "upload_dir": "/tmp/u", "cors_allow_credentials": False}
        )

        assert isinstance(settings.auth, AuthConfig) and settings.auth.jwt_secret == "s"
        assert isinstance(settings.ai, AIConfig) and settings.ai.use_mock is True
        assert isinstance(settings.upload, UploadConfig) and settings.upload.upload_dir == "/tmp/u"
        assert isinstance(settings.cors, CORSConfig) and settings.cors.allow_credentials is False
        assert settings.database.url == settings.database_url
