from .requests import (
    ActivateWithOtpRequest,
    LoginRequest,
    OtpRequest,
    RefreshRequest,
    ResetPasswordRequest,
    SignupRequest,
)
from .responses import (
    AccessTokenResponse,
    AccountOut,
    ActivationResponse,
    MessageResponse,
    SignupResponse,
    TokenPairResponse,
)

__all__ = [
    "ActivateWithOtpRequest",
    "LoginRequest",
    "OtpRequest",
    "RefreshRequest",
    "ResetPasswordRequest",
    "SignupRequest",
    "AccessTokenResponse",
    "AccountOut",
    "ActivationResponse",
    "MessageResponse",
    "SignupResponse",
    "TokenPairResponse",
]
