"""
Unit tests for configuration module.

Tests settings loading, validation, and caching.
"""

import pytest
from pydantic import ValidationError

from plumchat.config import (
    DatabaseSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)


class TestDatabaseSettings:
    """Test target database settings."""

    def test_defaults(self):
        settings = DatabaseSettings()

        assert settings.url is None
        assert settings.pool_size == 5
        assert settings.timeout == 30
        assert settings.default_max_rows == 1000
        assert settings.absolute_max_rows == 10000

    def test_url_from_env(self, mock_database_url):
        settings = DatabaseSettings()

        assert str(settings.url) == mock_database_url

    def test_empty_url_is_missing(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "")

        assert DatabaseSettings().url is None

    @pytest.mark.parametrize(
        "url",
        [
            "postgres://gpadmin@gp-master:5432/dw",
            "postgresql+asyncpg://user:pw@localhost/app",
            "greenplum://gpadmin@gp-master:5432/dw",
        ],
    )
    def test_postgres_family_urls_accepted(self, url):
        assert DatabaseSettings(url=url).url is not None

    def test_other_schemes_rejected(self):
        with pytest.raises(ValidationError, match="Unsupported database URL scheme"):
            DatabaseSettings(url="mysql://root@localhost:3306/app")

    def test_default_cap_cannot_exceed_absolute_cap(self):
        with pytest.raises(ValidationError, match="must not exceed"):
            DatabaseSettings(default_max_rows=5000, absolute_max_rows=100)

    def test_pool_size_bounds(self):
        with pytest.raises(ValidationError):
            DatabaseSettings(pool_size=0)


class TestSettings:
    """Test top-level settings."""

    def test_defaults(self):
        settings = Settings()

        assert settings.app_name == "PlumChat"
        assert settings.environment == "development"
        assert settings.is_development is True
        assert settings.is_production is False
        assert settings.tools.enabled is True
        assert settings.tools.policy_path is None

    def test_nested_env_vars(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("DATABASE_TIMEOUT", "12")
        monkeypatch.setenv("TOOLS_ENABLED", "false")

        settings = Settings()

        assert settings.is_production is True
        assert settings.database.timeout == 12
        assert settings.tools.enabled is False

    def test_invalid_environment(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "qa")

        with pytest.raises(ValidationError):
            Settings()


class TestSettingsCache:
    """Test cached settings access."""

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_clear_settings_cache_reloads(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("DATABASE_POOL_SIZE", "9")
        clear_settings_cache()

        second = get_settings()

        assert second is not first
        assert second.database.pool_size == 9
