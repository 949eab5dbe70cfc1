"""Profile endpoint for the authenticated account."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from credo.adapters.api.v1.auth.schemas import AccountOut
from credo.core.dependencies.auth import require_permission
from credo.domain.entities.account import Account
from credo.domain.services.auth.permissions import Permission
from credo.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/profile",
    response_model=AccountOut,
    status_code=status.HTTP_200_OK,
    summary="Return the profile of the authenticated account",
    responses={
        401: {"description": "Missing, invalid or expired access token"},
        403: {"description": "Account lacks the view_profile permission"},
    },
)
async def get_profile(
    account: Annotated[Account, Depends(require_permission(Permission.VIEW_PROFILE))],
    auth_service: AuthServiceDep,
) -> AccountOut:
    summary = await auth_service.profile(account.id)
    return AccountOut.from_summary(summary)
