"""Tagged outcome types returned by the service layer.

Services never raise for domain failures. They return either ``Ok(value)``
or ``Failure(kind, message, details)`` and the API boundary translates the
failure kind into an HTTP error (see api/failures.py).

    outcome = service.login(core, email, password)
    if isinstance(outcome, Failure):
        ...
    result = outcome.value
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class FailureKind(str, Enum):
    """Domain failure classes the core can report."""

    DUPLICATE_ACCOUNT = "DuplicateAccount"
    INVALID_CREDENTIALS = "InvalidCredentials"
    NOT_FOUND = "NotFound"
    BAD_REQUEST = "BadRequest"
    UNAUTHENTICATED = "Unauthenticated"
    ACCOUNT_CONFLICT = "AccountConflict"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome wrapping its value."""

    value: T


@dataclass(frozen=True)
class Failure:
    """Failed outcome with a safe, client-facing message."""

    kind: FailureKind
    message: str
    details: dict = field(default_factory=dict)
