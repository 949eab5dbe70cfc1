"""A Value Object representing an email address in the domain.

The address is validated on construction and normalized (trimmed and
lowercased), so two `Email` objects compare equal whenever they name the same
mailbox. Every account lookup and every one-time code is keyed on this
normalized form.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

from credo.core.exceptions import ValidationError


def mask_email(value: str) -> str:
    """Masks an email address for logs: ``ana@example.com`` -> ``a**@example.com``."""
    local, sep, domain = value.partition("@")
    if not sep:
        return "***"
    if len(local) <= 1:
        return f"*@{domain}"
    return f"{local[0]}{'*' * (len(local) - 1)}@{domain}"


@dataclass(frozen=True, slots=True)
class Email:
    """An immutable, self-validating email address.

    Attributes:
        value: The normalized string representation of the address.
    """

    value: str

    MAX_LENGTH: ClassVar[int] = 254
    EMAIL_PATTERN: ClassVar[re.Pattern] = re.compile(
        r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    )

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value.strip():
            raise ValidationError("Email is required")

        normalized = self.value.strip().lower()
        if len(normalized) > self.MAX_LENGTH or not self.EMAIL_PATTERN.match(normalized):
            raise ValidationError("Email address is malformed")

        # Bypass frozen=True to store the normalized value
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value

    @property
    def domain(self) -> str:
        return self.value.split("@", 1)[1]

    def mask_for_logging(self) -> str:
        return mask_email(self.value)
