"""
Password hashing and token helpers.

Passwords are hashed with PBKDF2-HMAC-SHA256 from ``cryptography`` and stored
as ``pbkdf2_sha256$<iterations>$<salt_b64>$<hash_b64>`` so the iteration count
can be raised later without invalidating existing hashes. Session and reset
tokens are random URL-safe strings; only their SHA-256 digest is persisted.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import os
import secrets

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

TOKEN_BYTES = 32
SALT_BYTES = 16
KEY_LENGTH = 32
HASH_SCHEME = "pbkdf2_sha256"


def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode())


def hash_password(password: str, iterations: int) -> str:
    """Hash a password with a fresh random salt."""
    salt = os.urandom(SALT_BYTES)
    digest = _derive(password, salt, iterations)
    return "$".join(
        [
            HASH_SCHEME,
            str(iterations),
            base64.b64encode(salt).decode(),
            base64.b64encode(digest).decode(),
        ]
    )


def verify_password(password: str, encoded: str | None) -> bool:
    """Check a password against a stored hash. Malformed hashes never match."""
    if not encoded:
        return False
    try:
        scheme, iterations, salt_b64, hash_b64 = encoded.split("$")
        if scheme != HASH_SCHEME:
            return False
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(hash_b64)
        candidate = _derive(password, salt, int(iterations))
    except ValueError:
        return False
    return hmac.compare_digest(candidate, expected)


def generate_token() -> str:
    """Generate a secure random session token."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def hash_token(token: str) -> str:
    """Hash a token for secure storage."""
    return hashlib.sha256(token.encode()).hexdigest()
