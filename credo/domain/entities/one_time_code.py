from datetime import datetime
from enum import Enum
from typing import Optional

import sqlalchemy as sa
from sqlmodel import Column, Field, SQLModel, String

from credo.utils.clock import ensure_utc, utc_now


class OtpPurpose(str, Enum):
    """What a one-time code may be spent on."""

    SIGNUP = "signup"
    PASSWORD_RESET = "password-reset"
    LOGIN = "login"


class OneTimeCode(SQLModel, table=True):
    """A short-lived numeric code sent to an email address.

    At most one live code exists per email: the unique constraint on `email`
    plus the upsert in the repository make issuing a new code replace the
    previous one. Only the SHA-256 digest of the code is stored.

    Attributes:
        email: Lowercased address the code was sent to.
        code_hash: Hex SHA-256 digest of the code.
        purpose: The `OtpPurpose` the code was issued for.
        expires_at: Absolute expiry (UTC).
        attempts: Number of mismatched verifications so far.
        created_at: Issue time (UTC).
    """

    __tablename__ = "one_time_codes"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(
        sa_column=Column(String(254), unique=True, index=True, nullable=False),
    )
    code_hash: str = Field(sa_column=Column(String(64), nullable=False))
    purpose: OtpPurpose = Field(
        sa_column=Column(
            sa.Enum(
                OtpPurpose,
                name="otp_purpose",
                values_callable=lambda enum_cls: [member.value for member in enum_cls],
            ),
            nullable=False,
        ),
    )
    expires_at: datetime = Field(
        sa_column=Column(sa.DateTime(timezone=True), index=True, nullable=False),
    )
    attempts: int = Field(default=0, nullable=False)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(sa.DateTime(timezone=True), nullable=False),
    )

    def is_expired(self, now: datetime) -> bool:
        return ensure_utc(self.expires_at) <= now
