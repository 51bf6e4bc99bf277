"""Translation of service outcomes into API errors.

Every FailureKind maps to exactly one exception class. The table is checked
for completeness at import time, so adding a FailureKind without deciding
its HTTP representation fails loudly instead of falling through to a 500.
"""

from typing import TypeVar

from ..exceptions import (
    AccountConflict,
    AccountsError,
    AuthenticationError,
    BadRequest,
    DuplicateAccount,
    InvalidCredentials,
    ResourceNotFound,
)
from ..outcomes import Failure, FailureKind, Ok

T = TypeVar("T")

FAILURE_ERRORS: dict[FailureKind, type[AccountsError]] = {
    FailureKind.DUPLICATE_ACCOUNT: DuplicateAccount,
    FailureKind.INVALID_CREDENTIALS: InvalidCredentials,
    FailureKind.NOT_FOUND: ResourceNotFound,
    FailureKind.BAD_REQUEST: BadRequest,
    FailureKind.UNAUTHENTICATED: AuthenticationError,
    FailureKind.ACCOUNT_CONFLICT: AccountConflict,
}

_unmapped = set(FailureKind) - set(FAILURE_ERRORS)
if _unmapped:
    raise RuntimeError(f"FailureKind without an API error: {sorted(k.name for k in _unmapped)}")


def to_error(failure: Failure) -> AccountsError:
    """Build the API exception for a failure."""
    return FAILURE_ERRORS[failure.kind](failure.message, failure.details)


def unwrap(outcome: Ok[T] | Failure) -> T:
    """Return the value of an Ok outcome or raise the mapped API error."""
    if isinstance(outcome, Failure):
        raise to_error(outcome)
    return outcome.value
