"""Account repository implementation using SQLAlchemy.

Implements `IAccountRepository` on an `AsyncSession`. Emails are normalized
(trimmed, lowercased) on every write and lookup, and the unique constraint on
``accounts.email`` is the final arbiter of concurrent signups: a losing insert
is rolled back and surfaced as `ConflictError`.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from credo.core.exceptions import ConflictError
from credo.domain.entities.account import Account
from credo.domain.interfaces.repositories import IAccountRepository
from credo.domain.value_objects.email import mask_email

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountRepository(IAccountRepository):
    """SQLAlchemy implementation of IAccountRepository.

    Each mutating call commits its own transaction; the repository is used
    with one session per request.
    """

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def create(self, account: Account) -> Account:
        """Inserts a new account.

        Raises:
            ConflictError: The email is already registered.
        """
        account.email = normalize_email(account.email)
        self.db_session.add(account)
        try:
            await self.db_session.commit()
        except IntegrityError as exc:
            await self.db_session.rollback()
            logger.info(
                "account_create_conflict",
                email=mask_email(account.email),
                error_type=type(exc).__name__,
            )
            raise ConflictError() from exc
        except Exception as e:
            await self.db_session.rollback()
            logger.error(
                "Error creating account",
                email=mask_email(account.email),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        await self.db_session.refresh(account)
        logger.debug("account_persisted", account_id=account.id)
        return account

    async def get_by_email(self, email: str) -> Optional[Account]:
        statement = select(Account).where(Account.email == normalize_email(email))
        result = await self.db_session.execute(statement)
        account = result.scalars().first()
        logger.debug(
            "Account lookup by email completed",
            email=mask_email(email),
            found=account is not None,
        )
        return account

    async def get_by_id(self, account_id: int) -> Optional[Account]:
        if account_id is None or account_id <= 0:
            return None
        return await self.db_session.get(Account, account_id)

    async def update(self, account: Account) -> Account:
        account.email = normalize_email(account.email)
        self.db_session.add(account)
        try:
            await self.db_session.commit()
        except IntegrityError as exc:
            await self.db_session.rollback()
            raise ConflictError() from exc
        except Exception as e:
            await self.db_session.rollback()
            logger.error(
                "Error updating account",
                account_id=account.id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        await self.db_session.refresh(account)
        return account

    async def delete(self, account: Account) -> None:
        account_id = account.id
        try:
            await self.db_session.delete(account)
            await self.db_session.commit()
        except Exception as e:
            await self.db_session.rollback()
            logger.error(
                "Error deleting account",
                account_id=account_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        logger.info("account_deleted", account_id=account_id)
