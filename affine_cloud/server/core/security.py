"""
Security helpers for password hashing and email validation.

Passwords are hashed with PBKDF2-HMAC-SHA256 and stored as ``salt$hash``
(both hex encoded). Verification uses a constant time comparison.
"""

import hashlib
import hmac
import os
import re
import secrets

PBKDF2_ITERATIONS = 100_000
SALT_BYTES = 16

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def hash_password(password: str) -> str:
    """Hash ``password`` with a fresh random salt."""
    salt = os.urandom(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${digest.hex()}"


def verify_password(password: str, hashed: str) -> bool:
    """Check ``password`` against a ``salt$hash`` string."""
    try:
        salt_hex, digest_hex = hashed.split("$", 1)
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(digest.hex(), digest_hex)


def is_valid_email(email: str) -> bool:
    return bool(email) and _EMAIL_PATTERN.match(email) is not None


def generate_token(nbytes: int = 32) -> str:
    """URL-safe random token."""
    return secrets.token_urlsafe(nbytes)
