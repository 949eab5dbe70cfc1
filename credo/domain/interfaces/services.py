"""Service interfaces for collaborators of the authentication core."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RenderedMessage:
    subject: str
    body: str


class INotifier(ABC):
    """Delivers a message to an address.

    Implementations never raise for transport problems: any failure,
    including a timeout, is logged and reported as ``False``.
    """

    @abstractmethod
    async def send(self, address: str, subject: str, body: str) -> bool:
        """Returns True iff the message was accepted for delivery."""
        raise NotImplementedError


class IMessageRenderer(ABC):
    """Turns domain events into human-readable messages."""

    @abstractmethod
    def render_activation(self, name: str, activation_link: str) -> RenderedMessage:
        raise NotImplementedError

    @abstractmethod
    def render_otp(self, code: str, purpose: str, expires_in_minutes: int) -> RenderedMessage:
        raise NotImplementedError


class IPasswordHasher(ABC):
    @abstractmethod
    def hash(self, password: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def verify(self, password: str, hashed_password: str) -> bool:
        raise NotImplementedError
