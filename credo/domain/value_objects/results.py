"""Result objects returned by the auth service.

The transport layer converts these into response schemas; they never carry
secrets other than the ones the caller is meant to receive.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from credo.domain.entities.account import Account


@dataclass(frozen=True, slots=True)
class AccountSummary:
    """Public view of an account."""

    id: int
    name: str
    email: str
    gender: str
    is_activated: bool
    role: Optional[str]
    permissions: Tuple[str, ...]
    created_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> "AccountSummary":
        return cls(
            id=account.id,
            name=account.name,
            email=account.email,
            gender=getattr(account.gender, "value", account.gender),
            is_activated=account.is_activated,
            role=getattr(account.role, "value", account.role),
            permissions=tuple(account.permissions or ()),
            created_at=account.created_at,
        )


@dataclass(frozen=True, slots=True)
class SignupResult:
    account: AccountSummary
    activation_token: str
    activation_link: str


@dataclass(frozen=True, slots=True)
class ActivationResult:
    account: AccountSummary
    already_activated: bool


@dataclass(frozen=True, slots=True)
class OtpVerification:
    """Outcome of a one-time code check that did not raise."""

    matched: bool
    attempts: int = 0
    exhausted: bool = False
