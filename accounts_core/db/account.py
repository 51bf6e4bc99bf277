"""Account operations (the credential store).

IMPORT CONVENTION:
- Core accesses these through core.account property
- NO direct import needed when using Core API

EMAIL POLICY:
Emails are case-insensitive. Every method that accepts an email normalizes
it with normalize_email() before touching the table, and the column is
declared COLLATE NOCASE, so "Ada@Example.com" and "ada@example.com" are the
same account.

TIMESTAMPS:
The store persists created_at/updated_at exactly as given. Services set them
explicitly when they create or mutate an account.
"""

import sqlite3

from ..schemas import Account, AuthProvider
from ..utils import uid


def normalize_email(email: str) -> str:
    """Canonical form of an email used for storage and lookup."""
    return email.strip().lower()


class AccountOperations:
    """Find/save/delete operations for the accounts table."""

    def __init__(self, conn: sqlite3.Connection):
        """Initialize account operations with a database connection.

        Args:
            conn: SQLite connection with row_factory set to sqlite3.Row
        """
        self._conn = conn

    def get_by_id(self, account_id: str) -> Account | None:
        row = self._conn.execute(
            "SELECT * FROM accounts WHERE id = ?",
            (account_id,)
        ).fetchone()
        return Account.from_row(row) if row else None

    def get_by_email(self, email: str) -> Account | None:
        row = self._conn.execute(
            "SELECT * FROM accounts WHERE email = ?",
            (normalize_email(email),)
        ).fetchone()
        return Account.from_row(row) if row else None

    def get_by_provider_subject(
        self,
        provider: AuthProvider,
        subject: str
    ) -> Account | None:
        """Secondary lookup by external identity (provider, subject)."""
        row = self._conn.execute(
            "SELECT * FROM accounts WHERE auth_provider = ? AND provider_subject = ?",
            (provider.value, subject)
        ).fetchone()
        return Account.from_row(row) if row else None

    def exists_by_email(self, email: str) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM accounts WHERE email = ?",
            (normalize_email(email),)
        ).fetchone()
        return row is not None

    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM accounts").fetchone()[0]

    def create(
        self,
        email: str,
        auth_provider: AuthProvider,
        created_at: str,
        full_name: str | None = None,
        password_hash: str | None = None,
        provider_subject: str | None = None,
    ) -> Account:
        """Insert a new account with an auto-generated id.

        Both timestamps are set to created_at.

        Returns:
            The stored Account

        Raises:
            sqlite3.IntegrityError: If the email (or provider subject) is
                already taken, or the row violates a provider invariant
        """
        account = Account(
            id=uid.new_account_id(),
            email=normalize_email(email),
            full_name=full_name,
            password_hash=password_hash,
            auth_provider=auth_provider,
            provider_subject=provider_subject,
            created_at=created_at,
            updated_at=created_at,
        )
        self._conn.execute(
            """INSERT INTO accounts
               (id, email, full_name, password_hash, auth_provider, provider_subject,
                created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                account.id,
                account.email,
                account.full_name,
                account.password_hash,
                account.auth_provider.value,
                account.provider_subject,
                account.created_at,
                account.updated_at,
            )
        )
        return account

    def save(self, account: Account) -> Account:
        """Persist every mutable column of an existing account.

        id, email and created_at are immutable and are not written.

        Raises:
            sqlite3.IntegrityError: If the update violates a table constraint
        """
        self._conn.execute(
            """UPDATE accounts
               SET full_name = ?, password_hash = ?, auth_provider = ?,
                   provider_subject = ?, updated_at = ?
               WHERE id = ?""",
            (
                account.full_name,
                account.password_hash,
                account.auth_provider.value,
                account.provider_subject,
                account.updated_at,
                account.id,
            )
        )
        return account

    def delete(self, account_id: str) -> bool:
        """Hard-delete an account.

        Returns:
            True if a row was deleted, False if no account had that id
        """
        cursor = self._conn.execute(
            "DELETE FROM accounts WHERE id = ?",
            (account_id,)
        )
        return cursor.rowcount > 0
