"""Tests for environment-driven settings."""
import pytest
from pydantic import ValidationError

from app.config import DEFAULT_SESSION_SECRET, Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("APP_BASE_URL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.PORT == 8080
        assert settings.SHUTDOWN_GRACE_SECONDS == 10
        assert settings.APP_BASE_URL == ""
        assert not settings.tls_enabled

    def test_base_url_gets_trailing_slash(self):
        settings = Settings(_env_file=None, APP_BASE_URL="https://rsvp.example.com")
        assert settings.APP_BASE_URL == "https://rsvp.example.com/"

    def test_base_url_slash_kept(self):
        settings = Settings(_env_file=None, APP_BASE_URL="https://rsvp.example.com/app/")
        assert settings.APP_BASE_URL == "https://rsvp.example.com/app/"

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, DEFAULT_TIMEZONE="Mars/Olympus")

    def test_tls_needs_both_paths(self):
        assert not Settings(_env_file=None, TLS_CERT_PATH="cert.pem").tls_enabled
        assert Settings(_env_file=None, TLS_CERT_PATH="cert.pem", TLS_KEY_PATH="key.pem").tls_enabled

    def test_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "9090")
        monkeypatch.setenv("DEFAULT_TIMEZONE", "Europe/Paris")
        settings = Settings(_env_file=None)
        assert settings.PORT == 9090
        assert settings.DEFAULT_TIMEZONE == "Europe/Paris"


class TestSessionSecret:
    """The placeholder secret is refused outside plain-HTTP dev login."""

    def test_placeholder_allowed_for_dev(self, monkeypatch):
        monkeypatch.delenv("SESSION_SECRET", raising=False)
        settings = Settings(_env_file=None)
        assert settings.SESSION_SECRET == DEFAULT_SESSION_SECRET

    def test_placeholder_refused_with_tls(self, monkeypatch):
        monkeypatch.delenv("SESSION_SECRET", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, TLS_CERT_PATH="cert.pem", TLS_KEY_PATH="key.pem")

    def test_placeholder_refused_without_dev_login(self, monkeypatch):
        monkeypatch.delenv("SESSION_SECRET", raising=False)
        with pytest.raises(ValidationError):
            Settings(_env_file=None, DEV_LOGIN_ENABLED=False)

    def test_real_secret_accepted(self):
        settings = Settings(
            _env_file=None,
            SESSION_SECRET="s3cret",
            TLS_CERT_PATH="cert.pem",
            TLS_KEY_PATH="key.pem",
            DEV_LOGIN_ENABLED=False,
        )
        assert settings.tls_enabled
