"""Repository implementations for the infrastructure layer."""

from .account_repository import AccountRepository
from .one_time_code_repository import OneTimeCodeRepository

__all__ = ["AccountRepository", "OneTimeCodeRepository"]
