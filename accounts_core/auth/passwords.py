"""Password hashing with bcrypt.

Digests are self-describing ``$2b$<rounds>$<salt+hash>`` strings, so
verification needs nothing but the digest itself. bcrypt only looks at the
first 72 bytes of its input; both functions truncate the UTF-8 encoding to
that window explicitly so hashing and verification always agree.
"""

import logging

import bcrypt

from ..config import settings

logger = logging.getLogger(__name__)

BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """Hash a password with a fresh salt.

    Args:
        password: Plain text password

    Returns:
        bcrypt digest (60 characters)
    """
    salt = bcrypt.gensalt(rounds=settings.bcrypt_work_factor)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Check a password against a stored digest in constant time.

    A missing or malformed digest never raises; it simply does not match.
    """
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False
