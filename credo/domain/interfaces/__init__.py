from .repositories import IAccountRepository, IOneTimeCodeRepository
from .services import IMessageRenderer, INotifier, IPasswordHasher, RenderedMessage

__all__ = [
    "IAccountRepository",
    "IOneTimeCodeRepository",
    "IMessageRenderer",
    "INotifier",
    "IPasswordHasher",
    "RenderedMessage",
]
