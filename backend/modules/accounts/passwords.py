"""
Password hashing and verification.

bcrypt with cost factor 12; the salt is embedded in the hash so every
call produces a different encoding of the same password.
"""

import bcrypt

from .exceptions import WeakPasswordError
from .models import MIN_PASSWORD_LENGTH

BCRYPT_ROUNDS = 12
# bcrypt only considers the first 72 bytes of input
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with a fresh salt."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a password against a stored hash.

    Returns False instead of raising when the stored hash is malformed.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def validate_password_policy(password: str) -> None:
    """Enforce length limits for new or changed passwords."""
    if len(password) < MIN_PASSWORD_LENGTH:
        raise WeakPasswordError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise WeakPasswordError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
