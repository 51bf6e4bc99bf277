"""Account identifier generation.

Account ids are opaque UUID v4 strings, assigned once when the account row is
created and never changed afterwards. This is the only module that imports
uuid4; the store calls uid.new_account_id().
"""

from uuid import uuid4


def new_account_id() -> str:
    """Generate a fresh account id (UUID v4 string)."""
    return str(uuid4())
