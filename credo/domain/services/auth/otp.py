import hashlib
import hmac
import secrets
from datetime import datetime, timedelta
from typing import Callable, Optional

from structlog import get_logger

from credo.core.exceptions import InvalidOtpError, OtpExhaustedError, OtpExpiredError, OtpNotFoundError
from credo.domain.entities.one_time_code import OneTimeCode, OtpPurpose
from credo.domain.interfaces.repositories import IOneTimeCodeRepository
from credo.domain.value_objects.email import mask_email
from credo.domain.value_objects.results import OtpVerification
from credo.utils.clock import utc_now

logger = get_logger(__name__)


def hash_code(code: str) -> str:
    """SHA-256 hex digest of a one-time code."""
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


def generate_code(length: int = 6) -> str:
    """Uniformly random numeric code of `length` digits, leading zeros allowed."""
    return "".join(secrets.choice("0123456789") for _ in range(length))


class OneTimeCodeService:
    """Issues, verifies and expires one-time codes.

    Guarantees:
        - a single live code per email (the repository upserts on email);
        - the attempt counter only moves on a mismatch, through an atomic
          increment, so concurrent wrong guesses cannot exceed the ceiling;
        - no code verifies past its expiry, whether or not the background
          sweep has already removed it;
        - a record is deleted on success, on expiry and on exhaustion.
    """

    def __init__(
        self,
        repository: IOneTimeCodeRepository,
        ttl: timedelta = timedelta(minutes=10),
        max_attempts: int = 3,
        length: int = 6,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.repository = repository
        self.ttl = ttl
        self.max_attempts = max_attempts
        self.length = length
        self._clock = clock

    async def issue(
        self, email: str, purpose: OtpPurpose, ttl: Optional[timedelta] = None
    ) -> str:
        """Creates a fresh code for `email`, replacing any live one.

        Returns:
            str: The plaintext code. Only its digest is persisted.
        """
        code = generate_code(self.length)
        now = self._clock()
        await self.repository.upsert(
            OneTimeCode(
                email=email,
                code_hash=hash_code(code),
                purpose=purpose,
                expires_at=now + (ttl if ttl is not None else self.ttl),
                attempts=0,
                created_at=now,
            )
        )
        logger.info("otp_issued", email=mask_email(email), purpose=purpose.value)
        return code

    async def verify(
        self, email: str, code: str, purpose: Optional[OtpPurpose] = None
    ) -> OtpVerification:
        """Checks `code` against the live code for `email`.

        Args:
            email: Normalized email address.
            code: Code supplied by the user.
            purpose: When given, a live code issued for another purpose is
                treated as absent.

        Returns:
            OtpVerification with ``matched=True``; the record is consumed.

        Raises:
            OtpNotFoundError: No live code (or none for this purpose).
            OtpExpiredError: The code expired; the record is deleted.
            OtpExhaustedError: This mismatch reached the attempt ceiling; the
                record is deleted.
            InvalidOtpError: Mismatch below the ceiling; the record is kept.
        """
        record = await self.repository.get(email)
        if record is None:
            raise OtpNotFoundError()
        if purpose is not None and OtpPurpose(record.purpose) != purpose:
            logger.info(
                "otp_purpose_mismatch",
                email=mask_email(email),
                expected=purpose.value,
                actual=OtpPurpose(record.purpose).value,
            )
            raise OtpNotFoundError()

        if record.is_expired(self._clock()):
            await self.repository.delete(email, record.code_hash)
            logger.info("otp_expired", email=mask_email(email))
            raise OtpExpiredError()

        if hmac.compare_digest(record.code_hash, hash_code(code or "")):
            if not await self.repository.delete(email, record.code_hash):
                # Replaced or consumed after the read
                raise OtpNotFoundError()
            logger.info("otp_verified", email=mask_email(email))
            return OtpVerification(matched=True, attempts=record.attempts)

        attempts = await self.repository.increment_attempts(email, record.code_hash)
        if attempts is None:
            # Replaced, consumed or purged after the read
            raise OtpNotFoundError()
        if attempts >= self.max_attempts:
            await self.repository.delete(email, record.code_hash)
            logger.warning("otp_exhausted", email=mask_email(email), attempts=attempts)
            raise OtpExhaustedError()

        logger.info("otp_mismatch", email=mask_email(email), attempts=attempts)
        raise InvalidOtpError()

    async def purge(self, email: str, code: Optional[str] = None) -> None:
        """Deletes the code for `email`; with `code`, only if it is still that code."""
        await self.repository.delete(email, hash_code(code) if code is not None else None)

    async def purge_expired(self) -> int:
        """Deletes every expired code; used by the background sweep."""
        removed = await self.repository.purge_expired(self._clock())
        if removed:
            logger.info("otp_expired_purged", count=removed)
        return removed
