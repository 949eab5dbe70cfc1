"""Repository interfaces for the authentication domain.

Domain services depend on these abstractions; the SQLAlchemy implementations
live in `credo.infrastructure.repositories`.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from credo.domain.entities.account import Account
from credo.domain.entities.one_time_code import OneTimeCode


class IAccountRepository(ABC):
    """Durable storage of accounts keyed by (normalized) email."""

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """Persists a new account.

        Raises:
            ConflictError: If the email is already taken, including when a
                concurrent signup wins the race at the unique constraint.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, account_id: int) -> Optional[Account]:
        raise NotImplementedError

    @abstractmethod
    async def update(self, account: Account) -> Account:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, account: Account) -> None:
        raise NotImplementedError


class IOneTimeCodeRepository(ABC):
    """Storage of one-time codes, at most one per email."""

    @abstractmethod
    async def upsert(self, code: OneTimeCode) -> OneTimeCode:
        """Inserts the code, replacing any existing code for the same email."""
        raise NotImplementedError

    @abstractmethod
    async def get(self, email: str) -> Optional[OneTimeCode]:
        raise NotImplementedError

    @abstractmethod
    async def increment_attempts(self, email: str, code_hash: Optional[str] = None) -> Optional[int]:
        """Atomically adds one to the attempt counter.

        When `code_hash` is given only a record still holding that digest is
        touched, so a code replaced after it was read is left alone.

        Returns:
            The new counter value, or None if the record vanished or was
            replaced meanwhile.
        """
        raise NotImplementedError

    @abstractmethod
    async def delete(self, email: str, code_hash: Optional[str] = None) -> bool:
        """Deletes the code for `email`, optionally only if it still has `code_hash`.

        Returns:
            True if a record was deleted.
        """
        raise NotImplementedError

    @abstractmethod
    async def purge_expired(self, now: datetime) -> int:
        """Deletes every code whose expiry is at or before `now`; returns the count."""
        raise NotImplementedError
