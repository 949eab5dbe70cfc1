"""Domain Value Objects for the authentication domain."""

from .email import Email, mask_email
from .password import Password
from .policy import AuthPolicy
from .results import AccountSummary, ActivationResult, OtpVerification, SignupResult
from .tokens import AccessGrant, TokenClass, TokenPair

__all__ = [
    "Email",
    "mask_email",
    "Password",
    "AuthPolicy",
    "AccountSummary",
    "ActivationResult",
    "OtpVerification",
    "SignupResult",
    "AccessGrant",
    "TokenClass",
    "TokenPair",
]
