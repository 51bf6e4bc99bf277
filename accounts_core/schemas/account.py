"""Account record as stored in the accounts table."""

import sqlite3
from enum import Enum

from pydantic import BaseModel, Field


class AuthProvider(str, Enum):
    """Which login path an account accepts."""

    LOCAL = "LOCAL"
    GOOGLE = "GOOGLE"


class Account(BaseModel):
    """A single user account.

    password_hash is only set for accounts that support email/password login.
    provider_subject is the Google ``sub`` claim and is only set once the
    account is linked to Google. Timestamps are ISO 8601 UTC strings and are
    set explicitly by whichever service mutates the account.
    """

    id: str
    email: str
    full_name: str | None = None
    password_hash: str | None = Field(default=None, repr=False)
    auth_provider: AuthProvider
    provider_subject: str | None = None
    created_at: str
    updated_at: str

    @property
    def supports_password_login(self) -> bool:
        return self.auth_provider == AuthProvider.LOCAL and bool(self.password_hash)

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Account":
        return cls(
            id=row["id"],
            email=row["email"],
            full_name=row["full_name"],
            password_hash=row["password_hash"],
            auth_provider=AuthProvider(row["auth_provider"]),
            provider_subject=row["provider_subject"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
