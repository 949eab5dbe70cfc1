import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Mapping, Optional

import jwt
from jwt import DecodeError, ExpiredSignatureError, InvalidSignatureError, PyJWTError
from structlog import get_logger

from credo.core.exceptions import (
    InvalidTokenError,
    MalformedTokenError,
    TokenExpiredError,
    TokenSignatureError,
)
from credo.domain.entities.account import Account
from credo.domain.value_objects.tokens import TokenClass
from credo.utils.clock import utc_now

logger = get_logger(__name__)

ALGORITHM = "HS256"
REQUIRED_CLAIMS = ["sub", "exp", "iat", "typ"]


class TokenService:
    """Issues and verifies signed JWTs for every token class.

    Tokens are signed with HS256 using a secret specific to their class
    (activation, access, refresh) and carry a ``typ`` claim naming the class.
    Verifying a token against the wrong class therefore fails at the signature
    check before the claim is ever looked at.

    Attributes:
        secrets: Signing secret per `TokenClass`.
        lifetimes: Default lifetime per `TokenClass`.
        issuer: Value of the ``iss`` claim.
        audience: Value of the ``aud`` claim.
    """

    def __init__(
        self,
        secrets: Mapping[TokenClass, str],
        lifetimes: Mapping[TokenClass, timedelta],
        issuer: str = "credo",
        audience: str = "credo:api:v1",
        clock: Callable[[], datetime] = utc_now,
    ):
        missing = [token_class.value for token_class in TokenClass if not secrets.get(token_class)]
        if missing:
            raise ValueError(f"Missing signing secret for token classes: {', '.join(missing)}")
        self.secrets = dict(secrets)
        self.lifetimes = dict(lifetimes)
        self.issuer = issuer
        self.audience = audience
        self._clock = clock

    def issue(
        self,
        claims: Mapping[str, Any],
        token_class: TokenClass,
        ttl: Optional[timedelta] = None,
    ) -> str:
        """Signs `claims` as a token of `token_class`.

        Args:
            claims: Application claims; must contain ``sub``.
            token_class: Selects the secret and the ``typ`` claim.
            ttl: Lifetime override. A negative value yields an already
                expired token.

        Returns:
            str: Encoded JWT.
        """
        now = self._clock()
        lifetime = ttl if ttl is not None else self.lifetimes[token_class]
        payload: Dict[str, Any] = {
            **claims,
            "sub": str(claims["sub"]),
            "typ": token_class.value,
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "exp": now + lifetime,
            "jti": uuid.uuid4().hex,
        }
        token = jwt.encode(payload, self.secrets[token_class], algorithm=ALGORITHM)
        logger.debug("token_issued", kind=token_class.value, subject=payload["sub"])
        return token

    def issue_for_account(
        self, account: Account, token_class: TokenClass, ttl: Optional[timedelta] = None
    ) -> str:
        """Issues a token whose subject is the account id, with its email embedded."""
        return self.issue({"sub": account.id, "email": account.email}, token_class, ttl)

    def lifetime_seconds(self, token_class: TokenClass) -> int:
        return int(self.lifetimes[token_class].total_seconds())

    def verify(self, token: str, token_class: TokenClass) -> Dict[str, Any]:
        """Verifies a token against the secret of `token_class` and returns its claims.

        Raises:
            TokenExpiredError: Signature valid but ``exp`` has passed.
            TokenSignatureError: Signed with another secret (wrong class or forged).
            MalformedTokenError: Not a structurally valid JWT.
            InvalidTokenError: Any other claim problem (issuer, audience, typ).
        """
        if not token or not isinstance(token, str):
            raise MalformedTokenError("Token is missing")
        try:
            claims = jwt.decode(
                token,
                self.secrets[token_class],
                algorithms=[ALGORITHM],
                audience=self.audience,
                issuer=self.issuer,
                options={"require": REQUIRED_CLAIMS},
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except InvalidSignatureError as exc:
            logger.info("token_signature_mismatch", kind=token_class.value)
            raise TokenSignatureError() from exc
        except DecodeError as exc:
            raise MalformedTokenError() from exc
        except PyJWTError as exc:
            logger.info("token_rejected", kind=token_class.value, reason=str(exc))
            raise InvalidTokenError() from exc

        if claims.get("typ") != token_class.value:
            logger.warning(
                "token_class_mismatch", expected=token_class.value, actual=claims.get("typ")
            )
            raise InvalidTokenError()
        return claims
