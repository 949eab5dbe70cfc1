"""Security utilities for password hashing.

Wraps passlib's CryptContext so the bcrypt work factor comes from settings
instead of a module constant. Hashing is CPU-bound; async callers run it in a
worker thread.
"""

from passlib.context import CryptContext

from credo.domain.interfaces.services import IPasswordHasher

BCRYPT_MAX_BYTES = 72


class PasswordHasher(IPasswordHasher):
    """Salted one-way password hashing with bcrypt.

    Args:
        rounds: bcrypt work factor. Production uses 12; test suites drop it
            to 4 to keep runs fast.
    """

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt."""
        return self._context.hash(password)

    def verify(self, password: str, hashed_password: str) -> bool:
        """Verify a password against its hash.

        The comparison inside bcrypt is constant-time. A malformed stored hash
        is treated as a mismatch, and so is a password longer than bcrypt
        reads, since it would otherwise match on its first 72 bytes.
        """
        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            return False
        try:
            return self._context.verify(password, hashed_password)
        except ValueError:
            return False
