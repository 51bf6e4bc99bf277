"""JWT access tokens.

Tokens are stateless HS256 JWTs carrying ``sub`` (the account email),
``iat`` and ``exp``. There is no server-side session table and no
revocation list: a token is valid from issuance until ``exp``.

Validation never raises for a bad token. It returns either
``Ok(TokenPayload)`` or ``TokenRejected(reason)``, where the reason tells
apart malformed tokens, bad signatures and expired tokens. Callers decide
how much of that to reveal (the HTTP layer reveals nothing).

The signing key comes from settings and is read once, when the process-wide
service is first built by default_service().
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from functools import cache

import jwt
from pydantic import ValidationError

from ..config import settings
from ..outcomes import Ok
from ..utils import isodatetime
from .schemas import TokenPayload

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class TokenFailure(str, Enum):
    """Why a token was rejected."""

    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"


@dataclass(frozen=True)
class TokenRejected:
    reason: TokenFailure


class TokenService:
    """Issues and validates signed, time-limited bearer tokens."""

    def __init__(self, secret_key: str, ttl: timedelta, algorithm: str = "HS256"):
        if not secret_key:
            raise ValueError("TokenService requires a non-empty secret key")
        if ttl <= timedelta(0):
            raise ValueError("Token TTL must be positive")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.ttl = ttl

    def issue(self, subject: str, now: int | None = None) -> str:
        """Create a token for subject.

        Args:
            subject: Account email to embed as ``sub``
            now: Issue time in Unix seconds (defaults to the current time)

        Returns:
            Encoded JWT string
        """
        issued_at = isodatetime.now_unix() if now is None else now
        payload = {
            "sub": subject,
            "iat": issued_at,
            "exp": issued_at + int(self.ttl.total_seconds()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def validate(self, token: str, now: int | None = None) -> Ok[TokenPayload] | TokenRejected:
        """Check signature, required claims and expiry.

        The token is valid while now < exp; from exp onwards it is EXPIRED.

        Args:
            token: Encoded JWT
            now: Check time in Unix seconds (defaults to the current time)
        """
        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={
                    "require": REQUIRED_CLAIMS,
                    # Expiry is checked below against an injectable clock
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidSignatureError:
            return TokenRejected(TokenFailure.BAD_SIGNATURE)
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected malformed token: {e}")
            return TokenRejected(TokenFailure.MALFORMED)

        try:
            payload = TokenPayload(**claims)
        except ValidationError:
            return TokenRejected(TokenFailure.MALFORMED)

        current = isodatetime.now_unix() if now is None else now
        if current >= payload.exp:
            return TokenRejected(TokenFailure.EXPIRED)

        return Ok(payload)


@cache
def default_service() -> TokenService:
    """Process-wide token service built from settings on first use."""
    return TokenService(
        settings.jwt_secret_key,
        timedelta(hours=settings.jwt_expiry_hours),
        settings.jwt_algorithm,
    )


def generate_access_token(subject: str) -> str:
    """Issue a token for subject with the default service."""
    return default_service().issue(subject)


def validate_access_token(token: str) -> Ok[TokenPayload] | TokenRejected:
    """Validate a token with the default service."""
    return default_service().validate(token)
