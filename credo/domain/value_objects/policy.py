"""Immutable policy knobs consumed by the domain services."""

from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True, slots=True)
class AuthPolicy:
    """Lifetimes and limits for the authentication flows.

    Built once from `Settings` by the dependency injection layer; services
    receive it through their constructor and never read settings themselves.
    """

    access_token_ttl: timedelta = timedelta(minutes=30)
    refresh_token_ttl: timedelta = timedelta(days=7)
    activation_token_ttl: timedelta = timedelta(days=1)
    otp_ttl: timedelta = timedelta(minutes=10)
    otp_max_attempts: int = 3
    otp_length: int = 6
    password_min_length: int = 6
    activation_url_base: str = "http://localhost:3000/api/v1/auth/activate"

    def activation_link(self, token: str) -> str:
        return f"{self.activation_url_base.rstrip('/')}/{token}"
