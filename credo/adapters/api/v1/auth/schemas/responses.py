from __future__ import annotations

"""Response Pydantic models for authentication and profile endpoints."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from credo.domain.value_objects.results import AccountSummary
from credo.domain.value_objects.tokens import AccessGrant, TokenPair


class AccountOut(BaseModel):
    """Public representation of an account."""

    id: int
    name: str
    email: str
    gender: str
    is_activated: bool
    role: Optional[str] = None
    permissions: List[str] = []
    created_at: datetime

    @classmethod
    def from_summary(cls, summary: AccountSummary) -> "AccountOut":
        return cls(
            id=summary.id,
            name=summary.name,
            email=summary.email,
            gender=summary.gender,
            is_activated=summary.is_activated,
            role=summary.role,
            permissions=list(summary.permissions),
            created_at=summary.created_at,
        )


class SignupResponse(BaseModel):
    message: str
    account: AccountOut
    activation_link: Optional[str] = None
    activation_token: Optional[str] = None


class ActivationResponse(BaseModel):
    message: str
    already_activated: bool
    account: AccountOut


class TokenPairResponse(BaseModel):
    """JWT access & refresh tokens with additional metadata."""

    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int  # Access token lifetime in seconds

    @classmethod
    def from_pair(cls, pair: TokenPair) -> "TokenPairResponse":
        return cls(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            token_type=pair.token_type,
            expires_in=pair.expires_in,
        )


class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int

    @classmethod
    def from_grant(cls, grant: AccessGrant) -> "AccessTokenResponse":
        return cls(
            access_token=grant.access_token,
            token_type=grant.token_type,
            expires_in=grant.expires_in,
        )


class MessageResponse(BaseModel):
    message: str
