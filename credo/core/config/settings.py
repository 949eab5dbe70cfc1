"""Main application settings and configuration management.

This module composes the settings mixins (app, database, auth, email) into a
single immutable `Settings` class, loaded once from environment variables and
the `.env` file. Domain services never read it directly: the dependency
injection layer translates it into policy objects and constructor arguments.

Environment Support:
- Development/Test: email test mode on unless EMAIL_TEST_MODE says otherwise
- Staging/Production: SMTP credentials required
"""

from functools import lru_cache
from typing import Any

from pydantic import model_validator
from pydantic_settings import SettingsConfigDict
from structlog import get_logger

from .app import AppSettings
from .auth import AuthSettings
from .database import DatabaseSettings
from .email import EmailSettings

logger = get_logger(__name__)


class Settings(AppSettings, DatabaseSettings, AuthSettings, EmailSettings):
    """The main settings class that aggregates all application configurations.

    Instances are frozen; tests build their own with keyword overrides
    instead of mutating the shared one.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _apply_environment_defaults(cls, data: Any) -> Any:
        """Enables email test mode for development and test unless set explicitly."""
        if isinstance(data, dict) and "EMAIL_TEST_MODE" not in data:
            env = data.get("APP_ENV", "development")
            if env in ("development", "test"):
                data = {**data, "EMAIL_TEST_MODE": True}
        return data

    def validate_required_fields(self) -> None:
        """Checks cross-field requirements that depend on the environment.

        Raises:
            ValueError: If the email configuration is unusable in production.
        """
        self.validate_smtp_config()
        logger.info(
            "settings_validated",
            env=self.APP_ENV,
            email_test_mode=self.EMAIL_TEST_MODE,
            debug=self.DEBUG,
        )


@lru_cache
def get_settings() -> Settings:
    """Builds the settings once per process and returns the cached instance."""
    return Settings()


settings = get_settings()
