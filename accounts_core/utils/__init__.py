"""Utility functions for accounts-core.

This package provides centralized utilities for common operations.
Import convention: use module-level imports for clarity.

    from accounts_core.utils import isodatetime, uid
    timestamp = isodatetime.now()
    account_id = uid.new_account_id()
"""

from . import isodatetime, uid

__all__ = ["isodatetime", "uid"]
