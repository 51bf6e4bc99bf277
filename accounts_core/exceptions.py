"""Exception hierarchy for accounts-core.

Every error raised at the API boundary derives from AccountsError and carries
a human-readable message, an optional details dict, and the HTTP status the
Flask error handlers in main.py render it with.
"""


class AccountsError(Exception):
    """Base exception for all accounts-core errors."""

    status_code = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ResourceNotFound(AccountsError):
    """Requested account does not exist."""

    status_code = 404


class ValidationError(AccountsError):
    """Request body failed validation."""

    status_code = 400


class BadRequest(AccountsError):
    """Request is well-formed but not allowed for this account."""

    status_code = 400


class DuplicateAccount(AccountsError):
    """An account with this email already exists."""

    status_code = 400


class AuthenticationError(AccountsError):
    """Missing, invalid or expired bearer token."""

    status_code = 401


class InvalidCredentials(AuthenticationError):
    """Email/password login failed. The message never says which part was wrong."""


class AccountConflict(AccountsError):
    """External identity cannot be linked to the existing account."""

    status_code = 409


class ConfigurationError(AccountsError):
    """A feature was used without the settings it needs."""
