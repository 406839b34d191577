"""Tests for configuration settings."""

import pytest

from project_branch_sync.config import Settings, SyncConfig, get_settings


class TestSettings:
    """Tests for Settings class."""

    def test_settings_defaults(self, monkeypatch):
        """Test default values are correct."""
        for name in ("SNYK_TOKEN", "GITHUB_TOKEN", "SNYK_LOG_PATH", "SNYK_API"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(
            _env_file=None,  # Don't load .env
        )

        assert settings.snyk_token == ""
        assert settings.github_token == ""
        assert settings.snyk_log_path is None
        assert settings.snyk_api == "https://api.snyk.io/v1"
        assert settings.snyk_rest_api == "https://api.snyk.io/rest"
        assert settings.log_level == "INFO"

    def test_settings_sync_defaults(self):
        """Test fan-out bounds default to 3 sources, 20 targets, 1 project."""
        sync = Settings(_env_file=None).sync

        assert sync.source_concurrency == 3
        assert sync.target_concurrency == 20
        assert sync.project_concurrency == 1
        assert sync.targets_page_size == 100

    def test_settings_from_env(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("SNYK_TOKEN", "platform_token_123")
        monkeypatch.setenv("GITHUB_TOKEN", "test_token_123")
        monkeypatch.setenv("SNYK_LOG_PATH", "/tmp/sync-logs")
        monkeypatch.setenv("SNYK_API", "https://api.eu.snyk.io/v1")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.snyk_token == "platform_token_123"
        assert settings.github_token == "test_token_123"
        assert settings.snyk_log_path == "/tmp/sync-logs"
        assert settings.snyk_api == "https://api.eu.snyk.io/v1"
        assert settings.log_level == "DEBUG"

    def test_settings_nested_from_env(self, monkeypatch):
        """Test nested config sections load from JSON env vars."""
        monkeypatch.setenv("SYNC", '{"target_concurrency": 5, "project_concurrency": 4}')

        settings = Settings(_env_file=None)

        assert settings.sync.target_concurrency == 5
        assert settings.sync.project_concurrency == 4
        assert settings.sync.source_concurrency == 3

    def test_settings_log_level_validation(self, monkeypatch):
        """Test that invalid log level is rejected."""
        monkeypatch.setenv("LOG_LEVEL", "INVALID")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_sync_bounds_validated(self):
        """Test that concurrency bounds must be positive."""
        with pytest.raises(ValueError):
            SyncConfig(target_concurrency=0)

    def test_settings_case_insensitive(self, monkeypatch):
        """Test that env var names are case-insensitive."""
        monkeypatch.setenv("snyk_token", "lower_token")
        monkeypatch.setenv("GITHUB_TOKEN", "upper_token")

        settings = Settings(_env_file=None)

        assert settings.snyk_token == "lower_token"
        assert settings.github_token == "upper_token"


class TestGetSettings:
    """Tests for get_settings function."""

    def test_get_settings_returns_settings(self):
        """Test that get_settings returns a Settings instance."""
        # Clear cache to ensure fresh settings
        get_settings.cache_clear()

        settings = get_settings()

        assert isinstance(settings, Settings)

    def test_get_settings_cached(self):
        """Test that get_settings returns cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        # Should be the same object (cached)
        assert settings1 is settings2
