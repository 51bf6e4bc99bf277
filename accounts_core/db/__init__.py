"""Database module for accounts-core.

This module provides the Core API for database operations.
Core encapsulates connection management and provides access to the
account operations (the credential store).

ARCHITECTURE:
- Core owns its connection (no Flask g.db dependency)
- atomic=True: Core MUST be used as a context manager. The transaction is
  opened with BEGIN IMMEDIATE so "check then create" sequences hold the
  write lock, commits on clean exit and rolls back on exception
- atomic=False: every statement autocommits; use for read-only requests

UNIQUENESS:
The accounts table enforces unique emails itself. Application-level
pre-checks exist for friendly errors only; sqlite3.IntegrityError raised by
the store is the authoritative signal of a concurrent duplicate.
"""

import sqlite3
from contextlib import closing
from pathlib import Path
from typing import TYPE_CHECKING

from ..config import settings
from ..schema import SCHEMA_PATH

if TYPE_CHECKING:
    from .account import AccountOperations


class Core:
    """
    Database Core with account operations.

    Maintains its own connection and transaction state.
    Provides access to account operations through a property.
    """

    def __init__(self, connection: sqlite3.Connection, atomic: bool = False):
        """Initialize Core with a database connection.

        Args:
            connection: SQLite connection with row_factory set to sqlite3.Row
            atomic: If True, Core MUST be used as context manager.
                    If False, Core has autocommit semantics.
        """
        self._conn = connection
        self._atomic = atomic
        self._account_ops = None

    @property
    def account(self) -> "AccountOperations":
        """Account operations.

        Lazy-loaded to avoid circular import issues.
        Operations are created on first access and cached.
        """
        if self._account_ops is None:
            from .account import AccountOperations
            self._account_ops = AccountOperations(self._conn)
        return self._account_ops

    def __enter__(self) -> "Core":
        """Enter context manager, opening a write transaction.

        Raises:
            RuntimeError: If Core was not created with atomic=True

        Returns:
            self for use in with-statement
        """
        if not self._atomic:
            raise RuntimeError(
                "Core must be created with atomic=True for context manager use. "
                "Use: with db.get_core(atomic=True) as core:"
            )
        self._conn.execute("BEGIN IMMEDIATE")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager, committing or rolling back transaction."""
        try:
            if exc_type is None:
                self._conn.commit()
            else:
                self._conn.rollback()
        finally:
            self._conn.close()

    def close(self) -> None:
        """Close the connection of a non-atomic Core."""
        self._conn.close()

    def __del__(self):
        """Cleanup connection if not already closed.

        Called during garbage collection. Closing an already closed
        connection is a no-op for sqlite3.
        """
        if hasattr(self, "_conn") and self._conn:
            try:
                self._conn.close()
            except sqlite3.ProgrammingError:
                # Connection created in another thread; let it be collected there
                pass


def _create_connection() -> sqlite3.Connection:
    """Create a fresh database connection.

    Returns:
        SQLite connection in autocommit mode (isolation_level=None) with
        row_factory set to sqlite3.Row and foreign keys enabled.
    """
    db_path = Path(settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(
        str(db_path),
        isolation_level=None,
        timeout=settings.database_timeout,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def get_core(atomic: bool = False) -> Core:
    """
    Get a database Core instance.

    Args:
        atomic: If True, returns a Core that MUST be used as context manager.
                Use for any request that writes.
                If False (default), returns a Core with autocommit semantics.

    Returns:
        Core instance with account operations

    Examples:
        Read-only:
        >>> core = get_core()
        >>> account = core.account.get_by_email("ada@example.com")

        Atomic (check-then-create):
        >>> with get_core(atomic=True) as core:
        ...     if core.account.get_by_email(email) is None:
        ...         core.account.create(...)
    """
    conn = _create_connection()
    return Core(conn, atomic=atomic)


# ============================================================================
# DATABASE INITIALIZATION
# ============================================================================

def init_db():
    """Apply schema.sql to a fresh database; existing databases are left alone."""
    db_path = Path(settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with closing(sqlite3.connect(str(db_path), timeout=settings.database_timeout)) as db:
        initialized = db.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='_schema_metadata'"
        ).fetchone()
        if initialized:
            return

        db.executescript(SCHEMA_PATH.read_text())
        db.commit()
