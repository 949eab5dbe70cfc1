"""Signup endpoint.

Creates an inactive account and emails its activation link. The API layer is
kept thin: parsing and response shaping only, all rules live in `AuthService`.
"""

from fastapi import APIRouter, status

from credo.adapters.api.v1.auth.schemas import AccountOut, SignupRequest, SignupResponse
from credo.core.config.settings import settings
from credo.infrastructure.dependency_injection.auth_dependencies import AuthServiceDep

router = APIRouter()


@router.post(
    "",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
    responses={
        400: {"description": "Invalid or missing field"},
        409: {"description": "Email already registered"},
        503: {"description": "Activation email could not be delivered; nothing was created"},
    },
)
async def signup(payload: SignupRequest, auth_service: AuthServiceDep) -> SignupResponse:
    result = await auth_service.signup(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        confirm_password=payload.confirm_password,
        gender=payload.gender,
    )
    response = SignupResponse(
        message="Account created. Check your email to activate it.",
        account=AccountOut.from_summary(result.account),
    )
    if settings.EXPOSE_ACTIVATION_TOKEN:
        response.activation_link = result.activation_link
        response.activation_token = result.activation_token
    return response
