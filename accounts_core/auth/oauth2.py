"""Google sign-in: Authlib client registration and account linking.

The redirect/consent exchange with Google is handled by Authlib's Flask
client. Once Google has asserted an identity, link_google_account() finds or
creates the local account, reconciles its provider linkage and issues a
token. It never renders HTTP responses.

Linking rules for an asserted (email, name, sub):
1. No account with that email: create a GOOGLE account, no password.
2. Account exists but is not linked to this Google subject (a LOCAL account,
   or a GOOGLE account with a different sub): depends on the relink policy.
   "upgrade" switches it to GOOGLE with the new subject and bumps
   updated_at; "reject" refuses with ACCOUNT_CONFLICT.
3. GOOGLE account with the same subject: nothing to change.
A token for the email is issued in every successful case.
"""

import logging
import sqlite3
from dataclasses import dataclass
from typing import Literal

from authlib.integrations.flask_client import OAuth

from ..config import settings
from ..db import Core
from ..outcomes import Failure, FailureKind, Ok
from ..schemas import Account, AuthProvider
from ..utils import isodatetime
from .schemas import GoogleIdentity
from .token import TokenService, default_service

logger = logging.getLogger(__name__)

RelinkPolicy = Literal["upgrade", "reject"]

oauth = OAuth()


def init_oauth(app) -> None:
    """Attach Authlib to the app and register Google if it is configured."""
    oauth.init_app(app)
    if settings.google_client_id:
        oauth.register(
            name="google",
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            server_metadata_url=settings.google_discovery_url,
            client_kwargs={"scope": "openid email profile"},
        )
        logger.info("Google OAuth2 client registered")
    else:
        logger.info("Google OAuth2 client not configured (GOOGLE_CLIENT_ID unset)")


def get_google_client():
    """Return the registered Google client, or None when not configured."""
    return oauth.create_client("google")


# ============================================================================
# Account linking
# ============================================================================


@dataclass(frozen=True)
class LinkResult:
    account: Account
    token: str
    created: bool
    changed: bool


def _conflict(account: Account) -> Failure:
    return Failure(
        FailureKind.ACCOUNT_CONFLICT,
        "An account with this email already exists and is not linked to this Google account",
        {"auth_provider": account.auth_provider.value},
    )


def _reconcile(
    core: Core,
    account: Account,
    identity: GoogleIdentity,
    policy: RelinkPolicy
) -> Ok[tuple[Account, bool]] | Failure:
    """Bring an existing account in line with the asserted Google identity."""
    if account.auth_provider == AuthProvider.GOOGLE and account.provider_subject == identity.subject:
        return Ok((account, False))

    if policy == "reject":
        logger.warning(f"Google link refused for account {account.id} ({account.auth_provider.value})")
        return _conflict(account)

    holder = core.account.get_by_provider_subject(AuthProvider.GOOGLE, identity.subject)
    if holder is not None and holder.id != account.id:
        logger.warning(f"Google subject already linked to account {holder.id}")
        return _conflict(holder)

    upgraded = account.model_copy(update={
        "auth_provider": AuthProvider.GOOGLE,
        "provider_subject": identity.subject,
        "updated_at": isodatetime.now(),
    })
    core.account.save(upgraded)
    logger.info(f"Account {account.id} linked to Google (was {account.auth_provider.value})")
    return Ok((upgraded, True))


def link_google_account(
    core: Core,
    identity: GoogleIdentity,
    policy: RelinkPolicy | None = None,
    tokens: TokenService | None = None
) -> Ok[LinkResult] | Failure:
    """
    Find or create the account for a verified Google identity and issue a token.

    Args:
        core: Core for the current (atomic) unit of work
        identity: Attributes asserted by Google
        policy: Relink policy (defaults to settings.oauth2_relink_policy)
        tokens: Token service (defaults to the process-wide service)

    Returns:
        Ok(LinkResult) or Failure(ACCOUNT_CONFLICT)
    """
    policy = policy or settings.oauth2_relink_policy
    tokens = tokens or default_service()

    created = False
    account = core.account.get_by_email(identity.email)

    if account is None:
        holder = core.account.get_by_provider_subject(AuthProvider.GOOGLE, identity.subject)
        if holder is not None:
            # This Google subject already belongs to an account under another email
            logger.warning(f"Google subject already linked to account {holder.id}")
            return _conflict(holder)

        try:
            account = core.account.create(
                email=identity.email,
                auth_provider=AuthProvider.GOOGLE,
                created_at=isodatetime.now(),
                full_name=identity.full_name,
                provider_subject=identity.subject,
            )
            created = True
            logger.info(f"Account created from Google sign-in: {account.id}")
        except sqlite3.IntegrityError:
            # A concurrent request created the account first; reconcile with it
            account = core.account.get_by_email(identity.email)
            if account is None:
                raise

    changed = created
    if not created:
        outcome = _reconcile(core, account, identity, policy)
        if isinstance(outcome, Failure):
            return outcome
        account, changed = outcome.value

    return Ok(LinkResult(
        account=account,
        token=tokens.issue(account.email),
        created=created,
        changed=changed,
    ))
