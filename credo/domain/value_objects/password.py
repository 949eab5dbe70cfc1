"""Password value object enforcing the length policy and confirmation match."""

from dataclasses import dataclass
from typing import ClassVar, Optional

from credo.core.exceptions import ValidationError


@dataclass(frozen=True, slots=True)
class Password:
    """A plaintext password that has passed the policy checks.

    Only ever held in memory long enough to be hashed. `repr` is masked so
    the value cannot end up in a log line or traceback by accident.
    """

    value: str
    min_length: int = 6

    # bcrypt ignores everything past the 72nd byte
    MAX_BYTES: ClassVar[int] = 72

    def __post_init__(self):
        if not isinstance(self.value, str) or self.value == "":
            raise ValidationError("Password is required")
        if len(self.value) < self.min_length:
            raise ValidationError(
                f"Password must be at least {self.min_length} characters long"
            )
        if len(self.value.encode("utf-8")) > self.MAX_BYTES:
            raise ValidationError(f"Password must be at most {self.MAX_BYTES} bytes long")

    def __repr__(self) -> str:
        return "Password('********')"

    @classmethod
    def confirmed(
        cls, value: Optional[str], confirmation: Optional[str], min_length: int = 6
    ) -> "Password":
        """Builds a password and checks it against its confirmation field."""
        if not confirmation:
            raise ValidationError("Password confirmation is required")
        password = cls(value, min_length)
        if password.value != confirmation:
            raise ValidationError("Passwords do not match")
        return password
