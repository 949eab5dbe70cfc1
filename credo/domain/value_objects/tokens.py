"""Token classes and the token bundles returned by login and refresh."""

from dataclasses import dataclass
from enum import Enum


class TokenClass(str, Enum):
    """Kinds of signed token. Each class is signed with its own secret and
    carries its name in the ``typ`` claim."""

    ACTIVATION = "activation"
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"


@dataclass(frozen=True, slots=True)
class AccessGrant:
    access_token: str
    expires_in: int
    token_type: str = "Bearer"
