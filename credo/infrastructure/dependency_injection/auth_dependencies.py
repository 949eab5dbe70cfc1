"""Dependency injection for the authentication services.

Translates the immutable `Settings` into the policy object, signing secrets
and collaborators the domain services take through their constructors, and
exposes FastAPI dependency factories for the API layer. Stateless
collaborators (token service, hasher, renderer, notifier) are built once per
process; repositories and the auth service are built per request around the
request's database session.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from credo.core.config.settings import Settings, get_settings
from credo.domain.interfaces.repositories import IAccountRepository, IOneTimeCodeRepository
from credo.domain.interfaces.services import IMessageRenderer, INotifier, IPasswordHasher
from credo.domain.services.auth.auth_service import AuthService
from credo.domain.services.auth.otp import OneTimeCodeService
from credo.domain.services.auth.token import TokenService
from credo.domain.value_objects.policy import AuthPolicy
from credo.domain.value_objects.tokens import TokenClass
from credo.infrastructure.database.async_db import get_async_db
from credo.infrastructure.repositories.account_repository import AccountRepository
from credo.infrastructure.repositories.one_time_code_repository import OneTimeCodeRepository
from credo.infrastructure.services.email.email_service import SmtpNotifier
from credo.infrastructure.services.email.templates import JinjaMessageRenderer
from credo.utils.security import PasswordHasher

# ---------------------------------------------------------------------------
# Builders (plain functions, reused by the lifespan task and the tests)
# ---------------------------------------------------------------------------


def build_auth_policy(settings: Settings) -> AuthPolicy:
    return AuthPolicy(
        access_token_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        refresh_token_ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        activation_token_ttl=timedelta(hours=settings.ACTIVATION_TOKEN_EXPIRE_HOURS),
        otp_ttl=timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
        otp_max_attempts=settings.OTP_MAX_ATTEMPTS,
        otp_length=settings.OTP_LENGTH,
        password_min_length=settings.PASSWORD_MIN_LENGTH,
        activation_url_base=settings.ACTIVATION_URL_BASE,
    )


def build_token_service(settings: Settings) -> TokenService:
    policy = build_auth_policy(settings)
    return TokenService(
        secrets={
            TokenClass.ACCESS: settings.ACCESS_TOKEN_SECRET.get_secret_value(),
            TokenClass.REFRESH: settings.REFRESH_TOKEN_SECRET.get_secret_value(),
            TokenClass.ACTIVATION: settings.ACTIVATION_TOKEN_SECRET.get_secret_value(),
        },
        lifetimes={
            TokenClass.ACCESS: policy.access_token_ttl,
            TokenClass.REFRESH: policy.refresh_token_ttl,
            TokenClass.ACTIVATION: policy.activation_token_ttl,
        },
        issuer=settings.JWT_ISSUER,
        audience=settings.JWT_AUDIENCE,
    )


def build_otp_service(repository: IOneTimeCodeRepository, settings: Settings) -> OneTimeCodeService:
    policy = build_auth_policy(settings)
    return OneTimeCodeService(
        repository,
        ttl=policy.otp_ttl,
        max_attempts=policy.otp_max_attempts,
        length=policy.otp_length,
    )


# ---------------------------------------------------------------------------
# Process-wide collaborators
# ---------------------------------------------------------------------------


@lru_cache
def get_token_service() -> TokenService:
    return build_token_service(get_settings())


@lru_cache
def get_password_hasher() -> IPasswordHasher:
    return PasswordHasher(rounds=get_settings().BCRYPT_ROUNDS)


@lru_cache
def get_message_renderer() -> IMessageRenderer:
    settings = get_settings()
    return JinjaMessageRenderer(settings.EMAIL_TEMPLATES_DIR, app_name=settings.EMAIL_FROM_NAME)


@lru_cache
def get_notifier() -> INotifier:
    return SmtpNotifier(get_settings())


# ---------------------------------------------------------------------------
# Request-scoped dependencies
# ---------------------------------------------------------------------------

AsyncDB = Annotated[AsyncSession, Depends(get_async_db)]


def get_account_repository(db: AsyncDB) -> IAccountRepository:
    return AccountRepository(db)


def get_one_time_code_repository(db: AsyncDB) -> IOneTimeCodeRepository:
    return OneTimeCodeRepository(db)


def get_auth_service(
    accounts: Annotated[IAccountRepository, Depends(get_account_repository)],
    codes: Annotated[IOneTimeCodeRepository, Depends(get_one_time_code_repository)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    hasher: Annotated[IPasswordHasher, Depends(get_password_hasher)],
    notifier: Annotated[INotifier, Depends(get_notifier)],
    renderer: Annotated[IMessageRenderer, Depends(get_message_renderer)],
) -> AuthService:
    """Factory that assembles the auth service for one request.

    Both repositories share the request's session, so a signup and its
    compensating delete run on the same connection.
    """
    settings = get_settings()
    return AuthService(
        accounts=accounts,
        otps=build_otp_service(codes, settings),
        tokens=tokens,
        hasher=hasher,
        notifier=notifier,
        renderer=renderer,
        policy=build_auth_policy(settings),
    )


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
