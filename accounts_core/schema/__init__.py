"""Database schema for accounts-core.

schema.sql is the source of truth for the account table and its invariants.
It is applied by db.init_db() on a fresh database.
"""

from pathlib import Path

SCHEMA_PATH = Path(__file__).parent / "schema.sql"
SCHEMA_VERSION = "20261019"

__all__ = ["SCHEMA_PATH", "SCHEMA_VERSION"]
