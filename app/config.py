"""Application configuration via environment variables."""
import pytz
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

DEFAULT_SESSION_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./rsvps.db"
    SESSION_SECRET: str = DEFAULT_SESSION_SECRET
    SESSION_MAX_AGE: int = 14 * 24 * 60 * 60
    APP_BASE_URL: str = ""
    DEFAULT_TIMEZONE: str = "UTC"
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    TLS_CERT_PATH: str = ""
    TLS_KEY_PATH: str = ""
    SHUTDOWN_GRACE_SECONDS: int = 10
    LOG_LEVEL: str = "INFO"
    DEV_LOGIN_ENABLED: bool = True

    @field_validator("APP_BASE_URL")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        value = value.strip()
        if value and not value.endswith("/"):
            value += "/"
        return value

    @field_validator("DEFAULT_TIMEZONE")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone '{value}'")
        return value

    @model_validator(mode="after")
    def _real_secret_outside_dev(self) -> "Settings":
        """The placeholder secret is only accepted for plain-HTTP dev-login setups."""
        if self.SESSION_SECRET == DEFAULT_SESSION_SECRET and (self.tls_enabled or not self.DEV_LOGIN_ENABLED):
            raise ValueError("SESSION_SECRET must be set when TLS is enabled or dev login is disabled")
        return self

    @property
    def tls_enabled(self) -> bool:
        return bool(self.TLS_CERT_PATH and self.TLS_KEY_PATH)

    class Config:
        env_file = ".env"


settings = Settings()
