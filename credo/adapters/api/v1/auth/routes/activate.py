"""Activation endpoints: by emailed link, or by a ``signup`` one-time code."""

from fastapi import APIRouter, status

from credo.adapters.api.v1.auth.schemas import (
    AccountOut,
    ActivateWithOtpRequest,
    ActivationResponse,
)
from credo.domain.value_objects.results import ActivationResult
from credo.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()


def _to_response(result: ActivationResult) -> ActivationResponse:
    message = "Account already activated" if result.already_activated else "Account activated"
    return ActivationResponse(
        message=message,
        already_activated=result.already_activated,
        account=AccountOut.from_summary(result.account),
    )


@router.post(
    "/otp",
    response_model=ActivationResponse,
    status_code=status.HTTP_200_OK,
    summary="Activate an account with a one-time code",
)
async def activate_with_otp(
    payload: ActivateWithOtpRequest, auth_service: AuthServiceDep
) -> ActivationResponse:
    return _to_response(await auth_service.activate_with_otp(payload.email, payload.otp))


@router.get(
    "/{token}",
    response_model=ActivationResponse,
    status_code=status.HTTP_200_OK,
    summary="Activate an account from the emailed link",
    responses={
        401: {"description": "Token invalid or expired"},
        404: {"description": "Account no longer exists"},
    },
)
async def activate(token: str, auth_service: AuthServiceDep) -> ActivationResponse:
    return _to_response(await auth_service.activate(token))
