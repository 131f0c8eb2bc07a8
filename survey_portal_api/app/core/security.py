"""
Security helpers for password hashing and session cookie signing.

Passwords are hashed with PBKDF2‑HMAC using SHA‑256 and a random
16‑byte salt per password.  The stored string has the form
``<iterations>$<salt hex>$<hash hex>`` so the work factor can be
raised later without invalidating existing hashes.

Session cookies carry an opaque token followed by its HMAC‑SHA256
signature, both base64url encoded and joined with a dot.  The
signature only proves that the token was issued by this server; the
token itself maps to a user id in the ``SessionStore``.
"""

import base64
import hashlib
import hmac
import os
import secrets
from typing import Optional

DEFAULT_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = '=' * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC‑SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def new_session_token() -> str:
    """Return a fresh random session token."""
    return secrets.token_urlsafe(32)


def sign_session_token(token: str, secret: str) -> str:
    """Return the cookie value ``token.signature`` for ``token``."""
    signature = _b64_url_encode(_sign(token.encode("utf-8"), secret))
    return f"{token}.{signature}"


def unsign_session_token(value: str, secret: str) -> Optional[str]:
    """Verify a signed cookie value and return the bare token.

    Returns ``None`` if the value is malformed or the signature does
    not match.
    """
    token, sep, signature_b64 = value.rpartition(".")
    if not sep or not token or not signature_b64:
        return None
    try:
        actual_sig = _b64_url_decode(signature_b64)
    except (ValueError, TypeError):
        return None
    expected_sig = _sign(token.encode("utf-8"), secret)
    # Constant‑time comparison to prevent timing attacks
    if not hmac.compare_digest(expected_sig, actual_sig):
        return None
    return token


def hash_password(password: str, iterations: int = DEFAULT_ITERATIONS) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    Parameters
    ----------
    password : str
        The plain text password to hash.
    iterations : int
        PBKDF2 work factor.

    Returns
    -------
    str
        ``iterations$salt$hash`` with salt and hash in hex.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, iterations)
    return f"{iterations}${salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored hash string.

    Recomputes the PBKDF2‑HMAC digest with the stored salt and
    iteration count and compares it in constant time.  A malformed
    stored value never verifies.
    """
    try:
        iterations_str, salt_hex, hash_hex = hashed_password.split('$', 2)
        iterations = int(iterations_str)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        return False
    dk = hashlib.pbkdf2_hmac('sha256', plain_password.encode('utf-8'), salt, iterations)
    return hmac.compare_digest(dk, stored_hash)
