"""Tests for Flask application initialization and configuration."""

import logging

from flask import Flask

from accounts_core.main import app


class TestAppInitialization:
    """Test Flask application initialization."""

    def test_app_is_flask_instance(self):
        """App should be a Flask application."""
        assert isinstance(app, Flask)

    def test_app_has_secret_key(self):
        """Sessions (OAuth2 state) need a signing key."""
        assert app.secret_key

    def test_app_in_testing_mode_when_configured(self, client):
        """App should respect TESTING configuration."""
        assert app.config['TESTING'] is True

    def test_blueprints_registered(self):
        """Both auth and users blueprints should be registered."""
        assert "auth" in app.blueprints
        assert "users" in app.blueprints

    def test_routes_use_api_prefix(self):
        """All endpoints live under the configured API prefix."""
        rules = {rule.rule for rule in app.url_map.iter_rules()}
        assert "/api/auth/register" in rules
        assert "/api/auth/login" in rules
        assert "/api/auth/me" in rules
        assert "/api/auth/oauth2/google" in rules
        assert "/api/auth/oauth2/callback/google" in rules
        assert "/api/users/profile" in rules


class TestCORSConfiguration:
    """Test CORS middleware configuration."""

    def test_cors_headers_present_on_health(self, client):
        """CORS headers should be present on API responses."""
        response = client.get("/health", headers={"Origin": "http://localhost:3000"})
        assert "Access-Control-Allow-Origin" in response.headers

    def test_cors_preflight_options_request(self, client):
        """OPTIONS preflight request should be handled."""
        response = client.options(
            "/api/auth/login",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST"
            }
        )
        assert response.status_code in (200, 204)


class TestLoggingConfiguration:
    """Test logging configuration."""

    def test_logging_level_configured(self):
        """Logging should be configured (root logger should have handlers)."""
        root_logger = logging.getLogger()
        assert len(root_logger.handlers) > 0


class TestHealthEndpoint:
    """Test health check endpoint."""

    def test_health_returns_status_ok(self, client):
        """Health check should report ok."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.get_json() == {"status": "ok"}
