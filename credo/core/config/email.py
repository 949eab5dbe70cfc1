"""Email configuration settings for the Credo application.

Covers the SMTP connection used to deliver activation links and one-time
codes, and the location of the Jinja2 templates those messages use.
"""

from pathlib import Path
from typing import Optional

from pydantic import EmailStr, Field, SecretStr
from pydantic_settings import BaseSettings

DEFAULT_TEMPLATES_DIR = str(Path(__file__).resolve().parents[2] / "templates" / "email")


class EmailSettings(BaseSettings):
    """Email configuration settings with secure defaults.

    Security considerations:
    - SMTP credentials are handled as SecretStr to prevent logging
    - TLS is enabled by default

    In test mode messages are logged instead of sent. When EMAIL_TEST_MODE is
    not set explicitly it defaults to on for development and test environments.
    """

    EMAIL_SMTP_HOST: str = Field(default="localhost", description="SMTP server hostname")
    EMAIL_SMTP_PORT: int = Field(
        default=587,
        ge=1,
        le=65535,
        description="SMTP server port (587 for TLS, 465 for SSL)",
    )
    EMAIL_SMTP_USERNAME: Optional[str] = Field(default=None, description="SMTP username")
    EMAIL_SMTP_PASSWORD: Optional[SecretStr] = Field(default=None, description="SMTP password")
    EMAIL_SMTP_USE_TLS: bool = Field(default=True, description="Enable STARTTLS")
    EMAIL_SMTP_USE_SSL: bool = Field(default=False, description="Enable implicit SSL")

    EMAIL_FROM_EMAIL: EmailStr = Field(default="noreply@example.com")
    EMAIL_FROM_NAME: str = Field(default="Credo")

    EMAIL_TEMPLATES_DIR: str = Field(
        default=DEFAULT_TEMPLATES_DIR,
        description="Directory containing email templates",
    )
    EMAIL_SEND_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound for a single SMTP send; exceeding it counts as a failed delivery",
    )
    EMAIL_TEST_MODE: bool = Field(
        default=False,
        description="Log emails instead of sending them",
    )

    def validate_smtp_config(self) -> None:
        """Validate SMTP configuration for production use.

        Raises:
            ValueError: If SMTP configuration is invalid or insecure
        """
        if self.EMAIL_TEST_MODE or getattr(self, "APP_ENV", "development") not in {"production", "staging"}:
            return

        if not self.EMAIL_SMTP_USERNAME or not self.EMAIL_SMTP_PASSWORD:
            raise ValueError("EMAIL_SMTP_USERNAME and EMAIL_SMTP_PASSWORD are required in production")

        if self.EMAIL_SMTP_USE_TLS and self.EMAIL_SMTP_USE_SSL:
            raise ValueError("Cannot enable both EMAIL_SMTP_USE_TLS and EMAIL_SMTP_USE_SSL")
