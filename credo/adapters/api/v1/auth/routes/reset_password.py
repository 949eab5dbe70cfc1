"""Password reset endpoint: sets a new password after verifying a one-time code."""

from fastapi import APIRouter, Request, status

from credo.adapters.api.v1.auth.schemas import MessageResponse, ResetPasswordRequest
from credo.core.config.settings import settings
from credo.core.ratelimiter import limiter
from credo.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Reset the password with a one-time code",
    responses={
        400: {"description": "Invalid input, wrong or expired code"},
        404: {"description": "No account or no active code"},
        429: {"description": "Code exhausted or too many requests"},
    },
)
@limiter.limit(settings.RATE_LIMIT_RESET)
async def reset_password(
    request: Request, payload: ResetPasswordRequest, auth_service: AuthServiceDep
) -> MessageResponse:
    await auth_service.reset_password(
        email=payload.email,
        otp=payload.otp,
        new_password=payload.new_password,
        confirm_new_password=payload.confirm_new_password,
    )
    return MessageResponse(message="Password has been reset")
