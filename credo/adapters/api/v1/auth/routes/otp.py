"""One-time code request endpoint."""

from fastapi import APIRouter, Request, status

from credo.adapters.api.v1.auth.schemas import MessageResponse, OtpRequest
from credo.core.config.settings import settings
from credo.core.ratelimiter import limiter
from credo.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Send a one-time code to a registered email",
    responses={
        404: {"description": "No account for this email"},
        429: {"description": "Too many code requests"},
        503: {"description": "The code could not be delivered"},
    },
)
@limiter.limit(settings.RATE_LIMIT_OTP)
async def request_otp(
    request: Request, payload: OtpRequest, auth_service: AuthServiceDep
) -> MessageResponse:
    await auth_service.request_otp(payload.email, payload.purpose)
    return MessageResponse(message="A one-time code has been sent to your email")
