"""Tests for configuration management."""

import pytest
from pydantic import ValidationError

from accounts_core.config import Settings


class TestConfiguration:
    """Test configuration loading and defaults."""

    def test_settings_loads(self):
        """Settings should load without errors."""
        settings = Settings()
        assert settings is not None

    def test_default_database_path(self):
        """Default database path should be set."""
        settings = Settings()
        assert settings.database_path == "./data/accounts.db"

    def test_default_api_prefix(self):
        """Default API prefix should be set."""
        settings = Settings()
        assert settings.api_prefix == "/api"

    def test_cors_origins_is_list(self):
        """CORS origins should be a list."""
        settings = Settings()
        assert isinstance(settings.cors_origins, list)
        assert "http://localhost:3000" in settings.cors_origins

    def test_jwt_defaults(self):
        """Tokens default to HS256 with a 24 hour lifetime."""
        settings = Settings()
        assert settings.jwt_algorithm == "HS256"
        assert settings.jwt_expiry_hours == 24

    def test_google_not_configured_by_default(self, monkeypatch):
        """Google sign-in is off unless a client id is provided."""
        monkeypatch.delenv("GOOGLE_CLIENT_ID", raising=False)
        settings = Settings()
        assert settings.google_client_id is None

    def test_default_relink_policy_is_upgrade(self):
        """A Google sign-in upgrades a matching local account by default."""
        settings = Settings()
        assert settings.oauth2_relink_policy == "upgrade"


class TestEnvironmentOverrides:
    """Settings come from environment variables (case-insensitive)."""

    def test_env_overrides_database_path(self, monkeypatch):
        """DATABASE_PATH overrides the default path."""
        monkeypatch.setenv("DATABASE_PATH", "/tmp/other.db")
        assert Settings().database_path == "/tmp/other.db"

    def test_env_overrides_relink_policy(self, monkeypatch):
        """OAUTH2_RELINK_POLICY selects the relink policy."""
        monkeypatch.setenv("OAUTH2_RELINK_POLICY", "reject")
        assert Settings().oauth2_relink_policy == "reject"

    def test_invalid_relink_policy_rejected(self, monkeypatch):
        """An unknown relink policy fails at startup."""
        monkeypatch.setenv("OAUTH2_RELINK_POLICY", "merge")
        with pytest.raises(ValidationError):
            Settings()

    def test_lowercase_env_name_accepted(self, monkeypatch):
        """Environment variable names are matched case-insensitively."""
        monkeypatch.setenv("jwt_expiry_hours", "2")
        assert Settings().jwt_expiry_hours == 2
