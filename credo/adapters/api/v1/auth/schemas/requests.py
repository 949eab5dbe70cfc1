from __future__ import annotations

"""Request-payload Pydantic models for authentication endpoints.

Only the shape is checked here (required fields, string types). The policy
rules (email format, password length, matching confirmation, known gender and
purpose) are enforced by the auth service so that every entry point reports
them the same way. Confirmation fields accept both camelCase and snake_case.
"""

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Concrete request models ----------------------------------------------------
# ---------------------------------------------------------------------------


class _Request(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=False)


class SignupRequest(_Request):
    """Payload expected by ``POST /auth/signup``."""

    name: str = Field(..., min_length=1, examples=["Ana"])
    email: str = Field(..., min_length=1, examples=["ana@example.com"])
    password: str = Field(..., min_length=1, examples=["secret1"])
    confirm_password: str = Field(..., min_length=1, alias="confirmPassword", examples=["secret1"])
    gender: str = Field(..., min_length=1, examples=["female"])


class LoginRequest(_Request):
    """Payload expected by ``POST /auth/login``."""

    email: str = Field(..., min_length=1, examples=["ana@example.com"])
    password: str = Field(..., min_length=1, examples=["secret1"])


class RefreshRequest(_Request):
    """Payload expected by ``POST /auth/refresh``."""

    refresh_token: str = Field(..., min_length=1, alias="refreshToken")


class OtpRequest(_Request):
    """Payload expected by ``POST /auth/otp``."""

    email: str = Field(..., min_length=1, examples=["ana@example.com"])
    purpose: str = Field(
        default="password-reset",
        examples=["password-reset"],
        description="One of: signup, password-reset, login",
    )


class ActivateWithOtpRequest(_Request):
    """Payload expected by ``POST /auth/activate/otp``."""

    email: str = Field(..., min_length=1, examples=["ana@example.com"])
    otp: str = Field(..., min_length=1, examples=["482913"])


class ResetPasswordRequest(_Request):
    """Payload expected by ``POST /auth/reset-password``."""

    email: str = Field(..., min_length=1, examples=["ana@example.com"])
    otp: str = Field(..., min_length=1, examples=["482913"])
    new_password: str = Field(..., min_length=1, alias="newPassword", examples=["n3wsecret"])
    confirm_new_password: str = Field(
        ..., min_length=1, alias="confirmNewPassword", examples=["n3wsecret"]
    )
