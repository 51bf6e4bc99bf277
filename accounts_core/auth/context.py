"""Per-request caller resolution.

A request carrying ``Authorization: Bearer <token>`` is resolved once into a
CallerContext (account id and email). The context is handed to the view
explicitly as its ``caller`` argument; nothing is stored in process-wide or
request-global state.

    @users_bp.get("/profile")
    @auth_required
    def get_profile(caller: CallerContext):
        ...

Every way of failing (no header, wrong scheme, malformed/forged/expired
token, account deleted since the token was issued) resolves to
UNAUTHENTICATED. The reason is logged but never returned to the client.
"""

import logging
from dataclasses import dataclass
from functools import wraps

from flask import request

from ..api.failures import unwrap
from ..db import Core, get_core
from ..outcomes import Failure, FailureKind, Ok
from .token import TokenRejected, TokenService, default_service

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"


@dataclass(frozen=True)
class CallerContext:
    """Identity of the authenticated caller for the current request."""

    account_id: str
    email: str


def _unauthenticated(message: str) -> Failure:
    return Failure(
        FailureKind.UNAUTHENTICATED,
        message,
        {"expected": f"Authorization: {BEARER_SCHEME} <token>"},
    )


def parse_bearer(authorization_header: str | None) -> str | None:
    """Extract the token from an Authorization header value.

    Returns None when the header is missing or does not use the Bearer scheme.
    """
    if not authorization_header:
        return None
    parts = authorization_header.split(" ")
    if len(parts) != 2 or parts[0].lower() != BEARER_SCHEME.lower() or not parts[1]:
        return None
    return parts[1]


def resolve_caller(
    core: Core,
    authorization_header: str | None,
    tokens: TokenService | None = None
) -> Ok[CallerContext] | Failure:
    """
    Validate the bearer token and look the account up once.

    Args:
        core: Core used for the single account lookup
        authorization_header: Raw Authorization header value (may be None)
        tokens: Token service (defaults to the process-wide service)

    Returns:
        Ok(CallerContext) or Failure(UNAUTHENTICATED)
    """
    tokens = tokens or default_service()

    if authorization_header is None:
        return _unauthenticated("Missing authorization header")

    token = parse_bearer(authorization_header)
    if token is None:
        return _unauthenticated("Invalid authorization header format")

    outcome = tokens.validate(token)
    if isinstance(outcome, TokenRejected):
        logger.warning(f"Bearer token rejected: {outcome.reason.value}")
        return _unauthenticated("Invalid or expired token")

    account = core.account.get_by_email(outcome.value.sub)
    if account is None:
        logger.warning("Bearer token is valid but its account no longer exists")
        return _unauthenticated("Invalid or expired token")

    return Ok(CallerContext(account_id=account.id, email=account.email))


def auth_required(f):
    """
    Decorator requiring a valid bearer token.

    Resolves the caller and passes it to the view as ``caller``.

    Raises:
        AuthenticationError: If the caller cannot be resolved
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        core = get_core()
        try:
            caller = unwrap(resolve_caller(core, request.headers.get("Authorization")))
        finally:
            core.close()
        return f(*args, caller=caller, **kwargs)

    return wrapper
