from __future__ import annotations

"""Structured exception hierarchy for Credo.

Every error raised by the authentication core derives from `CredoError` and
carries a machine-readable `code` next to its human-readable `message`. The
API layer maps each class to an HTTP status in `credo.core.handlers`; nothing
outside this hierarchy is allowed to leak to a client.
"""

from typing import Final

__all__: Final = [
    "CredoError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "NotActivatedError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "MalformedTokenError",
    "TokenSignatureError",
    "TokenExpiredError",
    "OtpNotFoundError",
    "OtpExpiredError",
    "InvalidOtpError",
    "OtpExhaustedError",
    "PermissionDeniedError",
    "DeliveryError",
    "InternalError",
]


class CredoError(Exception):
    """Base exception class for all custom errors in the Credo application.

    Attributes:
        message (str): A human-readable error message, safe to return to clients.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Input and state errors
# ---------------------------------------------------------------------------


class ValidationError(CredoError):
    """Input failed a shape or policy rule (missing field, short password...)."""

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class ConflictError(CredoError):
    """An account with the given email already exists."""

    def __init__(self, message: str = "Email already registered", code: str = "conflict"):
        super().__init__(message, code)


class NotFoundError(CredoError):
    """The referenced account does not exist."""

    def __init__(self, message: str = "Account not found", code: str = "not_found"):
        super().__init__(message, code)


class NotActivatedError(CredoError):
    """Login attempted on an account whose email was never confirmed."""

    def __init__(
        self,
        message: str = "Account is not activated",
        code: str = "account_not_activated",
    ):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Credential and token errors
# ---------------------------------------------------------------------------


class InvalidCredentialsError(CredoError):
    def __init__(self, message: str = "Invalid credentials", code: str = "invalid_credentials"):
        super().__init__(message, code)


class InvalidTokenError(CredoError):
    """A signed token could not be accepted.

    The token verifier raises the more specific subclasses below; the auth
    service collapses them into this generic kind before they reach a client.
    """

    def __init__(self, message: str = "Invalid token", code: str = "invalid_token"):
        super().__init__(message, code)


class MalformedTokenError(InvalidTokenError):
    """The token is not a structurally valid JWT."""

    def __init__(self, message: str = "Malformed token", code: str = "invalid_token"):
        super().__init__(message, code)


class TokenSignatureError(InvalidTokenError):
    """The signature does not match the secret of the expected token class."""

    def __init__(self, message: str = "Token signature mismatch", code: str = "invalid_token"):
        super().__init__(message, code)


class TokenExpiredError(CredoError):
    def __init__(self, message: str = "Token has expired", code: str = "token_expired"):
        super().__init__(message, code)


class PermissionDeniedError(CredoError):
    def __init__(self, message: str = "Permission denied", code: str = "permission_denied"):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# One-time code errors
# ---------------------------------------------------------------------------


class OtpNotFoundError(CredoError):
    """No live one-time code exists for the email (or for the requested purpose)."""

    def __init__(self, message: str = "No active code for this email", code: str = "otp_not_found"):
        super().__init__(message, code)


class OtpExpiredError(CredoError):
    def __init__(self, message: str = "Code has expired", code: str = "otp_expired"):
        super().__init__(message, code)


class InvalidOtpError(CredoError):
    def __init__(self, message: str = "Invalid code", code: str = "invalid_otp"):
        super().__init__(message, code)


class OtpExhaustedError(CredoError):
    """The attempt ceiling was reached; the code has been discarded."""

    def __init__(
        self,
        message: str = "Too many invalid attempts, request a new code",
        code: str = "otp_exhausted",
    ):
        super().__init__(message, code)


# ---------------------------------------------------------------------------
# Infrastructure errors
# ---------------------------------------------------------------------------


class DeliveryError(CredoError):
    """The notifier did not accept an outbound message."""

    def __init__(self, message: str = "Failed to deliver message", code: str = "delivery_failed"):
        super().__init__(message, code)


class InternalError(CredoError):
    """Opaque wrapper for unexpected failures; details are only logged."""

    def __init__(self, message: str = "Internal server error", code: str = "internal_error"):
        super().__init__(message, code)
