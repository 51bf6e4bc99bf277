"""Profile operations on an already-resolved account id.

The caller has been authenticated before any of these run, so a missing
account here means it disappeared in between (typically a concurrent
delete) and is reported as NOT_FOUND.

Updates happen in two steps. prepare_update() normalises the request and
hashes a new password; it runs before the write transaction opens.
update_profile() then applies the prepared changes inside it.
"""

import logging
from dataclasses import dataclass

from ..db import Core
from ..outcomes import Failure, FailureKind, Ok
from ..schemas import Account, AuthProvider
from ..utils import isodatetime
from ..auth import passwords
from ..auth.schemas import ProfileUpdateRequest

logger = logging.getLogger(__name__)

USER_NOT_FOUND_MESSAGE = "User not found"
OAUTH2_PASSWORD_MESSAGE = "Cannot change password for OAuth2 users"


@dataclass(frozen=True)
class ProfileChanges:
    """A validated profile update, ready to store. None leaves a field unchanged."""

    full_name: str | None = None
    password_hash: str | None = None


def _not_found(account_id: str) -> Failure:
    return Failure(FailureKind.NOT_FOUND, USER_NOT_FOUND_MESSAGE, {"user_id": account_id})


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def prepare_update(data: ProfileUpdateRequest) -> ProfileChanges:
    """Strip the name, drop blank fields and hash a new password."""
    return ProfileChanges(
        full_name=None if _is_blank(data.full_name) else data.full_name.strip(),
        password_hash=None if _is_blank(data.password) else passwords.hash_password(data.password),
    )


def get_profile(core: Core, account_id: str) -> Ok[Account] | Failure:
    account = core.account.get_by_id(account_id)
    if account is None:
        return _not_found(account_id)
    return Ok(account)


def update_profile(
    core: Core,
    account_id: str,
    changes: ProfileChanges
) -> Ok[Account] | Failure:
    """
    Apply a prepared profile update.

    A password change on a Google-linked account is refused before anything
    is applied. updated_at is bumped on every successful call, including one
    that changes nothing.

    Args:
        core: Core for the current (atomic) unit of work
        account_id: Id of the resolved caller
        changes: Output of prepare_update()

    Returns:
        Ok(updated Account), Failure(NOT_FOUND) or Failure(BAD_REQUEST)
    """
    account = core.account.get_by_id(account_id)
    if account is None:
        return _not_found(account_id)

    if changes.password_hash is not None and account.auth_provider == AuthProvider.GOOGLE:
        logger.warning(f"Password change refused for Google-linked account {account.id}")
        return Failure(
            FailureKind.BAD_REQUEST,
            OAUTH2_PASSWORD_MESSAGE,
            {"auth_provider": account.auth_provider.value}
        )

    update = {"updated_at": isodatetime.now()}
    if changes.full_name is not None:
        update["full_name"] = changes.full_name
    if changes.password_hash is not None:
        update["password_hash"] = changes.password_hash

    updated = account.model_copy(update=update)
    core.account.save(updated)

    logger.info(f"Profile updated: {account.id} (fields: {sorted(update)})")
    return Ok(updated)


def delete_account(core: Core, account_id: str) -> Ok[None] | Failure:
    """Hard-delete the account. A second delete of the same id is NOT_FOUND."""
    if not core.account.delete(account_id):
        return _not_found(account_id)

    logger.info(f"Account deleted: {account_id}")
    return Ok(None)
