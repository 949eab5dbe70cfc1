from __future__ import annotations

"""Authentication dependency pipeline for protected routes.

    bearer_token -> current_account -> require_permission(permission)

Each stage is a FastAPI dependency consuming the previous stage's output.
Failures are raised as `CredoError`s and rendered by the global handlers.
"""

from typing import Annotated, Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from credo.core.exceptions import InvalidTokenError, NotFoundError, PermissionDeniedError
from credo.domain.entities.account import Account
from credo.domain.services.auth.permissions import Permission, has_permission
from credo.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

__all__ = [
    "bearer_token",
    "get_current_account",
    "require_permission",
    "CurrentAccount",
]

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


# ---------------------------------------------------------------------------
# Public dependencies
# ---------------------------------------------------------------------------


async def bearer_token(token: Annotated[Optional[str], Depends(oauth2_scheme)]) -> str:
    """Extracts the bearer token from the ``Authorization`` header."""
    if not token:
        raise InvalidTokenError("Missing access token")
    return token


async def get_current_account(
    token: Annotated[str, Depends(bearer_token)],
    auth_service: AuthServiceDep,
) -> Account:
    """Return the authenticated account behind an access token.

    Performs no permission checks; compose with `require_permission` for that.
    A token whose account has been deleted is rejected as an invalid token.
    """
    try:
        return await auth_service.authenticate(token)
    except NotFoundError as exc:
        raise InvalidTokenError("Account no longer exists") from exc


CurrentAccount = Annotated[Account, Depends(get_current_account)]


def require_permission(permission: Permission) -> Callable:
    """Builds a dependency that admits only accounts holding `permission`."""

    async def _require(account: CurrentAccount) -> Account:
        if not has_permission(account, permission):
            raise PermissionDeniedError(f"Missing permission: {permission.value}")
        return account

    return _require
