"""Local (email/password) authentication.

Registration and login both end the same way: a token is issued for the
account email and returned together with the account.

Login never tells the caller why it failed. Unknown email, an account that
cannot log in with a password (Google-linked) and a wrong password all
produce the same INVALID_CREDENTIALS failure, so responses cannot be used to
enumerate accounts.
"""

import logging
import sqlite3
from dataclasses import dataclass

from ..db import Core
from ..outcomes import Failure, FailureKind, Ok
from ..schemas import Account, AuthProvider
from ..utils import isodatetime
from . import passwords
from .schemas import RegisterRequest
from .token import TokenService, default_service

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"
DUPLICATE_ACCOUNT_MESSAGE = "Email address already in use"


@dataclass(frozen=True)
class AuthResult:
    account: Account
    token: str


def _invalid_credentials() -> Failure:
    return Failure(FailureKind.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)


def register(
    core: Core,
    data: RegisterRequest,
    password_hash: str,
    tokens: TokenService | None = None
) -> Ok[AuthResult] | Failure:
    """
    Create a LOCAL account and issue its first token.

    The password digest is computed by the caller before the transaction
    opens, so the write lock is never held while bcrypt runs.

    Args:
        core: Core for the current (atomic) unit of work
        data: Validated registration request
        password_hash: bcrypt digest of data.password
        tokens: Token service (defaults to the process-wide service)

    Returns:
        Ok(AuthResult) or Failure(DUPLICATE_ACCOUNT)
    """
    tokens = tokens or default_service()

    if core.account.exists_by_email(data.email):
        logger.warning("Registration rejected: email already registered")
        return Failure(FailureKind.DUPLICATE_ACCOUNT, DUPLICATE_ACCOUNT_MESSAGE)

    now = isodatetime.now()
    try:
        account = core.account.create(
            email=data.email,
            auth_provider=AuthProvider.LOCAL,
            created_at=now,
            full_name=data.full_name,
            password_hash=password_hash,
        )
    except sqlite3.IntegrityError:
        # Lost a race with a concurrent registration for the same email
        logger.warning("Registration rejected by unique constraint")
        return Failure(FailureKind.DUPLICATE_ACCOUNT, DUPLICATE_ACCOUNT_MESSAGE)

    logger.info(f"Account registered: {account.id}")
    return Ok(AuthResult(account=account, token=tokens.issue(account.email)))


def authenticate(core: Core, email: str, password: str) -> Account | None:
    """
    Verify email/password credentials.

    Returns:
        The account if the credentials match, otherwise None
    """
    account = core.account.get_by_email(email)
    if account is None:
        return None

    if not account.supports_password_login:
        return None

    if not passwords.verify_password(password, account.password_hash):
        return None

    return account


def login(
    core: Core,
    email: str,
    password: str,
    tokens: TokenService | None = None
) -> Ok[AuthResult] | Failure:
    """
    Log in with email and password.

    Returns:
        Ok(AuthResult) or Failure(INVALID_CREDENTIALS), identical for every cause
    """
    tokens = tokens or default_service()

    account = authenticate(core, email, password)
    if account is None:
        logger.warning("Failed login attempt")
        return _invalid_credentials()

    logger.info(f"Successful login: {account.id}")
    return Ok(AuthResult(account=account, token=tokens.issue(account.email)))
