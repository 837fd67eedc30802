"""Password hashing with bcrypt."""

import base64
import hashlib

import bcrypt

from ideaboard.config import settings


def _pre_hash(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes; a base64 SHA-256 digest is 44 and never contains NUL.
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    """Return a bcrypt hash suitable for storing in ``User.password_hash``."""
    return bcrypt.hashpw(_pre_hash(password), bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain password against a stored hash."""
    try:
        return bcrypt.checkpw(_pre_hash(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False
