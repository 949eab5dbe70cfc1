"""Authentication settings: signing secrets, token lifetimes and OTP policy.
"""

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings

MIN_SECRET_LENGTH = 32


class AuthSettings(BaseSettings):
    """Defines the signing secrets and lifetimes for every token class, plus
    the one-time code and password policy.

    Each token class (activation, access, refresh) is signed with its own
    secret, so a token of one class never verifies as another.

    Security Note:
        - Secrets must be random strings of at least 32 characters and must
          never be logged or committed.
    """

    ACCESS_TOKEN_SECRET: SecretStr
    REFRESH_TOKEN_SECRET: SecretStr
    ACTIVATION_TOKEN_SECRET: SecretStr
    JWT_ISSUER: str = "credo"
    JWT_AUDIENCE: str = "credo:api:v1"

    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=30, ge=1)
    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(default=7, ge=1)
    ACTIVATION_TOKEN_EXPIRE_HOURS: int = Field(default=24, ge=1)

    OTP_EXPIRE_MINUTES: int = Field(default=10, ge=1, le=1440)
    OTP_MAX_ATTEMPTS: int = Field(default=3, ge=1)
    OTP_LENGTH: int = Field(default=6, ge=4, le=10)
    OTP_PURGE_INTERVAL_SECONDS: int = Field(
        default=300,
        ge=0,
        description="Period of the background sweep deleting expired codes; 0 disables it",
    )

    PASSWORD_MIN_LENGTH: int = Field(default=6, ge=1)
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    ACTIVATION_URL_BASE: str = Field(
        default="http://localhost:3000/api/v1/auth/activate",
        description="Prefix of the activation link; the token is appended as the last path segment",
    )
    EXPOSE_ACTIVATION_TOKEN: bool = Field(
        default=False,
        description="Return the activation token in the signup response (development only)",
    )

    @model_validator(mode="after")
    def _validate_token_secrets(self) -> "AuthSettings":
        """Rejects short secrets and secrets shared between token classes."""
        secrets = {
            "ACCESS_TOKEN_SECRET": self.ACCESS_TOKEN_SECRET.get_secret_value(),
            "REFRESH_TOKEN_SECRET": self.REFRESH_TOKEN_SECRET.get_secret_value(),
            "ACTIVATION_TOKEN_SECRET": self.ACTIVATION_TOKEN_SECRET.get_secret_value(),
        }
        for name, value in secrets.items():
            if len(value) < MIN_SECRET_LENGTH:
                raise ValueError(f"{name} must be at least {MIN_SECRET_LENGTH} characters long")
        if len(set(secrets.values())) != len(secrets):
            raise ValueError("Token secrets must be distinct for each token class")
        return self
