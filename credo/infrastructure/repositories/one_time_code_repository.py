"""One-time code repository implementation using SQLAlchemy.

The concurrency guarantees of the code store live here, at the storage layer:

- ``upsert`` relies on the unique constraint on ``one_time_codes.email``
  (``INSERT ... ON CONFLICT (email) DO UPDATE``), so two concurrent requests
  for the same email leave exactly one live code;
- ``increment_attempts`` is a single ``UPDATE ... RETURNING`` statement, so
  concurrent wrong guesses are counted exactly once each;
- ``increment_attempts`` and ``delete`` can be scoped to the digest that was
  read, so a code replaced in the meantime is neither consumed nor counted.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, delete, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from credo.domain.entities.one_time_code import OneTimeCode
from credo.domain.interfaces.repositories import IOneTimeCodeRepository
from credo.domain.value_objects.email import mask_email

logger = get_logger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}
_REPLACED_COLUMNS = ("code_hash", "purpose", "expires_at", "attempts", "created_at")


class OneTimeCodeRepository(IOneTimeCodeRepository):
    """SQLAlchemy implementation of IOneTimeCodeRepository."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session
        self.table = OneTimeCode.__table__

    async def upsert(self, code: OneTimeCode) -> OneTimeCode:
        values = {
            "email": code.email.strip().lower(),
            "code_hash": code.code_hash,
            "purpose": code.purpose,
            "expires_at": code.expires_at,
            "attempts": code.attempts or 0,
            "created_at": code.created_at,
        }
        dialect = self.db_session.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)

        try:
            if insert is not None:
                statement = insert(self.table).values(**values)
                statement = statement.on_conflict_do_update(
                    index_elements=[self.table.c.email],
                    set_={column: statement.excluded[column] for column in _REPLACED_COLUMNS},
                )
                await self.db_session.execute(statement)
            else:
                # Generic fallback: replace inside one transaction
                await self.db_session.execute(
                    delete(self.table).where(self.table.c.email == values["email"])
                )
                await self.db_session.execute(self.table.insert().values(**values))
            await self.db_session.commit()
        except Exception as e:
            await self.db_session.rollback()
            logger.error(
                "Error storing one-time code",
                email=mask_email(values["email"]),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        stored = await self.get(values["email"])
        return stored if stored is not None else code

    async def get(self, email: str) -> Optional[OneTimeCode]:
        statement = (
            select(OneTimeCode)
            .where(OneTimeCode.email == email.strip().lower())
            .execution_options(populate_existing=True)
        )
        result = await self.db_session.execute(statement)
        return result.scalars().first()

    def _matching(self, email: str, code_hash: Optional[str]):
        criteria = [self.table.c.email == email.strip().lower()]
        if code_hash is not None:
            criteria.append(self.table.c.code_hash == code_hash)
        return and_(*criteria)

    async def increment_attempts(self, email: str, code_hash: Optional[str] = None) -> Optional[int]:
        statement = (
            update(self.table)
            .where(self._matching(email, code_hash))
            .values(attempts=self.table.c.attempts + 1)
            .returning(self.table.c.attempts)
        )
        result = await self.db_session.execute(statement)
        attempts = result.scalar_one_or_none()
        await self.db_session.commit()
        return attempts

    async def delete(self, email: str, code_hash: Optional[str] = None) -> bool:
        result = await self.db_session.execute(
            delete(self.table).where(self._matching(email, code_hash))
        )
        await self.db_session.commit()
        return bool(result.rowcount)

    async def purge_expired(self, now: datetime) -> int:
        result = await self.db_session.execute(
            delete(self.table).where(self.table.c.expires_at <= now)
        )
        await self.db_session.commit()
        return result.rowcount or 0
