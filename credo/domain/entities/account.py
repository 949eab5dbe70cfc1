from datetime import datetime
from enum import Enum
from typing import List, Optional

import sqlalchemy as sa
from sqlmodel import Column, Field, SQLModel, String

from credo.utils.clock import utc_now


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class Role(str, Enum):
    """Represents the role of an account (RBAC).

    Each role maps to a fixed set of permissions, see
    `credo.domain.services.auth.permissions.ROLE_PERMISSIONS`.
    """

    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"
    GUEST = "guest"


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


class Account(SQLModel, table=True):
    """Represents an Account entity and acts as the Aggregate Root of the
    authentication domain.

    An account is created inactive by signup, flipped to active exactly once
    by activation, and has its password hash replaced by a password reset. It
    is only ever deleted to roll back a signup whose activation email could
    not be delivered.

    Attributes:
        id: Primary key.
        name: Display name.
        email: Unique email address, stored lowercased.
        hashed_password: bcrypt hash; the plaintext is never stored.
        gender: One of `Gender`.
        is_activated: Whether the email address has been confirmed.
        role: Optional `Role`, used for permission checks.
        permissions: Extra permission names granted on top of the role.
        created_at: Creation timestamp (UTC).
        updated_at: Last modification timestamp (UTC).
    """

    __tablename__ = "accounts"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(sa_column=Column(String(100), nullable=False))
    email: str = Field(
        sa_column=Column(String(254), unique=True, index=True, nullable=False),  # Unique, indexed column
    )
    hashed_password: str = Field(sa_column=Column(String(255), nullable=False))
    gender: Gender = Field(
        sa_column=Column(
            sa.Enum(Gender, name="gender", values_callable=_enum_values),
            nullable=False,
        ),
    )
    is_activated: bool = Field(default=False, nullable=False)
    role: Optional[Role] = Field(
        default=Role.USER,
        sa_column=Column(
            sa.Enum(Role, name="role", values_callable=_enum_values),
            nullable=True,
        ),
    )
    permissions: List[str] = Field(
        default_factory=list,
        sa_column=Column(sa.JSON, nullable=False),
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(sa.DateTime(timezone=True), nullable=False),
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(sa.DateTime(timezone=True), nullable=False),
    )

    def touch(self) -> None:
        """Marks the record as modified now."""
        self.updated_at = utc_now()
