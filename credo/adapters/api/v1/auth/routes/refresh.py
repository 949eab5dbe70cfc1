"""Refresh endpoint: trades a refresh token for a new access token."""

from fastapi import APIRouter, status

from credo.adapters.api.v1.auth.schemas import AccessTokenResponse, RefreshRequest
from credo.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=AccessTokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Issue a new access token",
)
async def refresh(payload: RefreshRequest, auth_service: AuthServiceDep) -> AccessTokenResponse:
    grant = await auth_service.refresh(payload.refresh_token)
    return AccessTokenResponse.from_grant(grant)
