from .auth_service import AuthService
from .otp import OneTimeCodeService
from .permissions import Permission, has_permission, has_role
from .token import TokenService

__all__ = [
    "AuthService",
    "OneTimeCodeService",
    "Permission",
    "TokenService",
    "has_permission",
    "has_role",
]
