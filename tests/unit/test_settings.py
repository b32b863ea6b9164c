"""
Unit tests for Pydantic Settings configuration.

Tests URL normalization, defaults and the production seeding guard.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError


class TestSettings:
    """Tests for Settings configuration."""

    def test_settings_has_defaults(self):
        """Settings should have sensible defaults."""
        from elevion.config.settings import Settings

        settings = Settings(_env_file=None)
        assert settings.client_preview_ttl_days == 30
        assert settings.search_result_limit == 15
        assert settings.stripe_default_currency == "usd"

    def test_test_environment_is_sqlite(self):
        """The test run points the global settings at SQLite."""
        from elevion.config.settings import settings

        assert settings.is_sqlite is True
        assert settings.is_production is False

    def test_allowed_origins_includes_localhost(self):
        from elevion.config.settings import Settings

        settings = Settings(_env_file=None)
        assert "http://localhost:5173" in settings.allowed_origins
        assert "http://localhost:3000" in settings.allowed_origins


class TestDatabaseUrl:
    """Tests for DATABASE_URL normalization."""

    @pytest.mark.parametrize("url", [
        "postgres://user:pw@db:5432/elevion",
        "postgresql://user:pw@db:5432/elevion",
    ])
    def test_plain_postgres_urls_use_asyncpg(self, url):
        from elevion.config.settings import Settings

        settings = Settings(_env_file=None, database_url=url)
        assert settings.database_url == "postgresql+asyncpg://user:pw@db:5432/elevion"
        assert settings.is_sqlite is False

    def test_async_urls_are_untouched(self):
        from elevion.config.settings import Settings

        url = "sqlite+aiosqlite:///./dev.db"
        assert Settings(_env_file=None, database_url=url).database_url == url


class TestSeedingGuard:
    """Sample data must never be enabled in production."""

    def test_seeding_rejected_in_production(self):
        from elevion.config.settings import Settings

        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, environment="production", seed_sample_data=True)

    def test_seeding_allowed_in_development(self):
        from elevion.config.settings import Settings

        settings = Settings(_env_file=None, environment="development", seed_sample_data=True)
        assert settings.seed_sample_data is True
        assert settings.is_development is True
