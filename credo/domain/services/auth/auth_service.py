"""Authentication service: the credential lifecycle of an account.

This module orchestrates every flow an account goes through:

    signup -> (activation link | signup code) -> login -> refresh
                     \\-> request code -> reset password

It depends only on domain interfaces (repositories, notifier, renderer,
hasher) plus the token and one-time code services, all injected. Every public
method either returns a result object or raises a `CredoError`; unexpected
exceptions are logged with full detail and re-raised as an opaque
`InternalError`.
"""

import asyncio
import functools
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from structlog import get_logger

from credo.core.exceptions import (
    ConflictError,
    CredoError,
    DeliveryError,
    InternalError,
    InvalidCredentialsError,
    InvalidTokenError,
    NotActivatedError,
    NotFoundError,
    TokenExpiredError,
    ValidationError,
)
from credo.domain.entities.account import Account, Gender, Role
from credo.domain.entities.one_time_code import OtpPurpose
from credo.domain.interfaces.repositories import IAccountRepository
from credo.domain.interfaces.services import IMessageRenderer, INotifier, IPasswordHasher
from credo.domain.services.auth.otp import OneTimeCodeService
from credo.domain.services.auth.token import TokenService
from credo.domain.value_objects.email import Email
from credo.domain.value_objects.password import Password
from credo.domain.value_objects.policy import AuthPolicy
from credo.domain.value_objects.results import AccountSummary, ActivationResult, SignupResult
from credo.domain.value_objects.tokens import AccessGrant, TokenClass, TokenPair
from credo.utils.clock import utc_now

logger = get_logger(__name__)

NAME_MAX_LENGTH = 100


def service_operation(name: str):
    """Marks a coroutine method as a public auth operation.

    Domain errors pass through untouched; anything else is logged and
    replaced by `InternalError`. Cancellation is not intercepted.
    """

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except CredoError:
                raise
            except Exception as exc:
                logger.exception(
                    "auth_operation_failed", operation=name, error_type=type(exc).__name__
                )
                raise InternalError() from exc

        return wrapper

    return decorator


class AuthService:
    """Coordinates signup, activation, login, refresh, one-time codes,
    password reset and profile lookup.

    Attributes:
        accounts: Account repository.
        otps: One-time code service.
        tokens: Token issuer/verifier.
        hasher: Password hasher (bcrypt, run off the event loop).
        notifier: Outbound message channel.
        renderer: Builds subject and body for outbound messages.
        policy: Lifetimes and limits.
    """

    def __init__(
        self,
        accounts: IAccountRepository,
        otps: OneTimeCodeService,
        tokens: TokenService,
        hasher: IPasswordHasher,
        notifier: INotifier,
        renderer: IMessageRenderer,
        policy: Optional[AuthPolicy] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.accounts = accounts
        self.otps = otps
        self.tokens = tokens
        self.hasher = hasher
        self.notifier = notifier
        self.renderer = renderer
        self.policy = policy or AuthPolicy()
        self._clock = clock

    # ------------------------------------------------------------------
    # Signup and activation
    # ------------------------------------------------------------------

    @service_operation("signup")
    async def signup(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        confirm_password: Optional[str],
        gender: Optional[str],
    ) -> SignupResult:
        """Registers an inactive account and emails its activation link.

        Exactly one account is created and exactly one message is attempted.
        If the message is not accepted the account is deleted again and
        `DeliveryError` is raised, so a failed signup leaves no trace.

        Raises:
            ValidationError: Missing or malformed field, unknown gender,
                password too short or not matching its confirmation.
            ConflictError: The email is already registered.
            DeliveryError: The activation message could not be delivered.
        """
        clean_name = self._require_name(name)
        address = Email(email or "")
        account_gender = self._parse_gender(gender)
        secret = Password.confirmed(password, confirm_password, self.policy.password_min_length)

        if await self.accounts.get_by_email(address.value) is not None:
            logger.info("signup_rejected_duplicate", email=address.mask_for_logging())
            raise ConflictError()

        hashed_password = await asyncio.to_thread(self.hasher.hash, secret.value)
        account = await self.accounts.create(
            Account(
                name=clean_name,
                email=address.value,
                hashed_password=hashed_password,
                gender=account_gender,
                is_activated=False,
                role=Role.USER,
            )
        )
        logger.info("account_created", account_id=account.id, email=address.mask_for_logging())

        try:
            activation_token, activation_link = await self._send_activation(account)
        except BaseException:
            await asyncio.shield(self._rollback_signup(account))
            raise

        return SignupResult(
            account=AccountSummary.from_account(account),
            activation_token=activation_token,
            activation_link=activation_link,
        )

    @service_operation("activate")
    async def activate(self, token: Optional[str]) -> ActivationResult:
        """Activates the account named by an activation token.

        Idempotent: activating an already active account succeeds without
        writing anything and reports ``already_activated=True``.

        Raises:
            ValidationError: No token given.
            TokenExpiredError: The token is past its lifetime.
            InvalidTokenError: Malformed, forged, or of another token class.
            NotFoundError: The account embedded in the token no longer exists.
        """
        if not token:
            raise ValidationError("Activation token is required")

        claims = self._verify(token, TokenClass.ACTIVATION)
        email = claims.get("email")
        if not email:
            raise InvalidTokenError()

        account = await self.accounts.get_by_email(email)
        if account is None:
            raise NotFoundError()
        return await self._mark_activated(account)

    @service_operation("activate_with_otp")
    async def activate_with_otp(self, email: Optional[str], otp: Optional[str]) -> ActivationResult:
        """Activates an account with a ``signup`` one-time code instead of a link.

        Raises:
            ValidationError: Malformed email or missing code.
            NotFoundError: No account for the email.
            OtpNotFoundError, OtpExpiredError, InvalidOtpError,
            OtpExhaustedError: See `OneTimeCodeService.verify`.
        """
        address = Email(email or "")
        if not otp:
            raise ValidationError("Code is required")

        account = await self.accounts.get_by_email(address.value)
        if account is None:
            raise NotFoundError()

        await self.otps.verify(address.value, otp, OtpPurpose.SIGNUP)
        return await self._mark_activated(account)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    @service_operation("login")
    async def login(self, email: Optional[str], password: Optional[str]) -> TokenPair:
        """Exchanges email and password for an access/refresh token pair.

        Activation is checked before the password, so an inactive account is
        reported as such whatever password was supplied.

        Raises:
            ValidationError: Malformed email or empty password.
            NotFoundError: No account for the email.
            NotActivatedError: The account has not been activated.
            InvalidCredentialsError: Wrong password.
        """
        address = Email(email or "")
        if not password:
            raise ValidationError("Password is required")

        account = await self.accounts.get_by_email(address.value)
        if account is None:
            logger.info("login_unknown_account", email=address.mask_for_logging())
            raise NotFoundError()
        if not account.is_activated:
            logger.info("login_not_activated", account_id=account.id)
            raise NotActivatedError()

        matches = await asyncio.to_thread(self.hasher.verify, password, account.hashed_password)
        if not matches:
            logger.warning("login_invalid_credentials", account_id=account.id)
            raise InvalidCredentialsError()

        pair = TokenPair(
            access_token=self.tokens.issue_for_account(account, TokenClass.ACCESS),
            refresh_token=self.tokens.issue_for_account(account, TokenClass.REFRESH),
            expires_in=self.tokens.lifetime_seconds(TokenClass.ACCESS),
        )
        logger.info("login_succeeded", account_id=account.id)
        return pair

    @service_operation("refresh")
    async def refresh(self, refresh_token: Optional[str]) -> AccessGrant:
        """Issues a new access token for a valid refresh token.

        The refresh token itself is not rotated.

        Raises:
            ValidationError: No token given.
            TokenExpiredError: The refresh token expired.
            InvalidTokenError: Malformed, forged, or of another token class
                (e.g. an access token).
            NotFoundError: The account no longer exists.
        """
        if not refresh_token:
            raise ValidationError("Refresh token is required")

        claims = self._verify(refresh_token, TokenClass.REFRESH)
        account = await self.accounts.get_by_id(self._subject_id(claims))
        if account is None:
            raise NotFoundError()

        logger.info("access_token_refreshed", account_id=account.id)
        return AccessGrant(
            access_token=self.tokens.issue_for_account(account, TokenClass.ACCESS),
            expires_in=self.tokens.lifetime_seconds(TokenClass.ACCESS),
        )

    @service_operation("authenticate")
    async def authenticate(self, access_token: Optional[str]) -> Account:
        """Resolves the account behind an access token."""
        if not access_token:
            raise InvalidTokenError("Missing access token")

        claims = self._verify(access_token, TokenClass.ACCESS)
        account = await self.accounts.get_by_id(self._subject_id(claims))
        if account is None:
            raise NotFoundError()
        return account

    # ------------------------------------------------------------------
    # One-time codes and password reset
    # ------------------------------------------------------------------

    @service_operation("request_otp")
    async def request_otp(self, email: Optional[str], purpose: Any) -> None:
        """Issues a one-time code for a registered email and sends it.

        Any previous live code for the email stops verifying. If the message
        cannot be delivered the new code is deleted again.

        Raises:
            ValidationError: Malformed email or unknown purpose.
            NotFoundError: No account for the email.
            DeliveryError: The code could not be delivered.
        """
        address = Email(email or "")
        otp_purpose = self._parse_purpose(purpose)

        account = await self.accounts.get_by_email(address.value)
        if account is None:
            raise NotFoundError()

        code = await self.otps.issue(address.value, otp_purpose)
        try:
            message = self.renderer.render_otp(
                code, otp_purpose.value, int(self.otps.ttl.total_seconds() // 60)
            )
            delivered = await self.notifier.send(address.value, message.subject, message.body)
            if not delivered:
                raise DeliveryError()
        except BaseException:
            logger.warning("otp_delivery_failed", email=address.mask_for_logging())
            await asyncio.shield(self.otps.purge(address.value, code))
            raise

    @service_operation("reset_password")
    async def reset_password(
        self,
        email: Optional[str],
        otp: Optional[str],
        new_password: Optional[str],
        confirm_new_password: Optional[str],
    ) -> None:
        """Replaces the password after a ``password-reset`` code is verified.

        All input checks run before the code is looked at, so a rejected new
        password neither consumes the code nor counts as an attempt.

        Raises:
            ValidationError: Missing field, mismatch or short password.
            NotFoundError: No account for the email.
            OtpNotFoundError, OtpExpiredError, InvalidOtpError,
            OtpExhaustedError: See `OneTimeCodeService.verify`.
        """
        address = Email(email or "")
        if not otp:
            raise ValidationError("Code is required")
        secret = Password.confirmed(
            new_password, confirm_new_password, self.policy.password_min_length
        )

        account = await self.accounts.get_by_email(address.value)
        if account is None:
            raise NotFoundError()

        await self.otps.verify(address.value, otp, OtpPurpose.PASSWORD_RESET)

        account.hashed_password = await asyncio.to_thread(self.hasher.hash, secret.value)
        account.touch()
        await self.accounts.update(account)
        logger.info("password_reset_completed", account_id=account.id)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    @service_operation("profile")
    async def profile(self, account_id: int) -> AccountSummary:
        account = await self.accounts.get_by_id(account_id)
        if account is None:
            raise NotFoundError()
        return AccountSummary.from_account(account)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _send_activation(self, account: Account) -> tuple[str, str]:
        token = self.tokens.issue_for_account(account, TokenClass.ACTIVATION)
        link = self.policy.activation_link(token)
        message = self.renderer.render_activation(account.name, link)
        delivered = await self.notifier.send(account.email, message.subject, message.body)
        if not delivered:
            raise DeliveryError()
        logger.info("activation_email_sent", account_id=account.id)
        return token, link

    async def _rollback_signup(self, account: Account) -> None:
        logger.warning("signup_rolled_back", account_id=account.id)
        await self.accounts.delete(account)

    async def _mark_activated(self, account: Account) -> ActivationResult:
        if account.is_activated:
            logger.info("account_already_activated", account_id=account.id)
            return ActivationResult(AccountSummary.from_account(account), already_activated=True)

        account.is_activated = True
        account.touch()
        account = await self.accounts.update(account)
        logger.info("account_activated", account_id=account.id)
        return ActivationResult(AccountSummary.from_account(account), already_activated=False)

    def _verify(self, token: str, token_class: TokenClass) -> Dict[str, Any]:
        """Verifies a token, collapsing structural and signature failures."""
        try:
            return self.tokens.verify(token, token_class)
        except TokenExpiredError:
            raise
        except InvalidTokenError as exc:
            raise InvalidTokenError() from exc

    @staticmethod
    def _subject_id(claims: Dict[str, Any]) -> int:
        try:
            return int(claims["sub"])
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidTokenError() from exc

    @staticmethod
    def _require_name(name: Optional[str]) -> str:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Name is required")
        clean = name.strip()
        if len(clean) > NAME_MAX_LENGTH:
            raise ValidationError(f"Name must be at most {NAME_MAX_LENGTH} characters long")
        return clean

    @staticmethod
    def _parse_gender(gender: Any) -> Gender:
        try:
            return Gender(str(gender or "").strip().lower())
        except ValueError as exc:
            allowed = ", ".join(member.value for member in Gender)
            raise ValidationError(f"Gender must be one of: {allowed}") from exc

    @staticmethod
    def _parse_purpose(purpose: Any) -> OtpPurpose:
        try:
            return OtpPurpose(getattr(purpose, "value", purpose))
        except ValueError as exc:
            allowed = ", ".join(member.value for member in OtpPurpose)
            raise ValidationError(f"Purpose must be one of: {allowed}") from exc
