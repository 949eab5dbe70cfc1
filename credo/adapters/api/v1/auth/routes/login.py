"""Login endpoint: exchanges email and password for an access/refresh pair."""

from fastapi import APIRouter, Request, status

from credo.adapters.api.v1.auth.schemas import LoginRequest, TokenPairResponse
from credo.core.config.settings import settings
from credo.core.ratelimiter import limiter
from credo.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=TokenPairResponse,
    status_code=status.HTTP_200_OK,
    summary="Authenticate with email and password",
    responses={
        401: {"description": "Wrong password"},
        403: {"description": "Account not activated"},
        404: {"description": "No account for this email"},
        429: {"description": "Too many login attempts"},
    },
)
@limiter.limit(settings.RATE_LIMIT_LOGIN)
async def login(
    request: Request, payload: LoginRequest, auth_service: AuthServiceDep
) -> TokenPairResponse:
    pair = await auth_service.login(payload.email, payload.password)
    return TokenPairResponse.from_pair(pair)
