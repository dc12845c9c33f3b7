"""
Unit tests for application settings.
"""

import pytest
from pydantic import ValidationError

from books_api.src.config import Settings, clear_settings_cache, get_settings


class TestSettingsDefaults:
    """Tests for default values."""

    def test_defaults(self):
        """Test defaults run in production with the /api prefix."""
        settings = Settings(_env_file=None)

        assert settings.api_prefix == "/api"
        assert settings.environment == "production"
        assert settings.is_production
        assert not settings.is_development
        assert settings.password_bcrypt_rounds == 10


class TestSettingsValidation:
    """Tests for field validators."""

    def test_environment_normalized(self):
        """Test environment is lower-cased."""
        settings = Settings(_env_file=None, environment="Development")

        assert settings.environment == "development"
        assert settings.is_development

    def test_invalid_environment(self):
        """Test unknown environments are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, environment="qa")

    def test_log_level_normalized(self):
        """Test log level is upper-cased."""
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_format(self):
        """Test unknown log formats are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_format="xml")

    def test_bcrypt_rounds_bounds(self):
        """Test bcrypt rounds outside 4-14 are rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, password_bcrypt_rounds=3)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, password_bcrypt_rounds=15)

    def test_empty_cors_origins_allow_all(self):
        """Test an empty origin list falls back to a wildcard."""
        assert Settings(_env_file=None, cors_origins=[]).cors_origins == ["*"]


class TestSettingsEnvironment:
    """Tests for environment variable loading."""

    def test_env_prefix(self, monkeypatch):
        """Test BOOKS_API_ variables override defaults."""
        monkeypatch.setenv("BOOKS_API_ENVIRONMENT", "development")
        monkeypatch.setenv("BOOKS_API_PORT", "8080")

        settings = Settings(_env_file=None)

        assert settings.is_development
        assert settings.port == 8080

    def test_cached_settings_reload(self, monkeypatch):
        """Test clearing the cache picks up new environment values."""
        clear_settings_cache()
        monkeypatch.setenv("BOOKS_API_APP_NAME", "Shelf")
        try:
            assert get_settings().app_name == "Shelf"
        finally:
            clear_settings_cache()
