"""Salted PBKDF2 credentials for collector accounts.

Stored format is ``base64(salt) + ":" + base64(derived_key)``: a 128-bit
random salt and a 256-bit PBKDF2-HMAC-SHA256 key.  The iteration count is
not recorded in the credential, so it must never change for existing rows.
"""

import base64
import binascii
import hashlib
import hmac
import logging
import secrets

logger = logging.getLogger(__name__)

SALT_BYTES = 16
KEY_BYTES = 32
ITERATIONS = 100_000
HASH_NAME = "sha256"
SEPARATOR = ":"


def _derive(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac(
        HASH_NAME, password.encode("utf-8"), salt, ITERATIONS, dklen=KEY_BYTES
    )


def hash_password(password: str) -> str:
    """Return a new salted credential for *password*."""
    salt = secrets.token_bytes(SALT_BYTES)
    key = _derive(password, salt)
    return (
        base64.b64encode(salt).decode("ascii")
        + SEPARATOR
        + base64.b64encode(key).decode("ascii")
    )


def verify_password(password: str, credential: str) -> bool:
    """Check *password* against a stored credential.

    Malformed credentials fail closed: they are logged and reported as a
    mismatch rather than raised.
    """
    if not password or not credential:
        return False

    salt_b64, sep, key_b64 = credential.partition(SEPARATOR)
    if not sep:
        logger.warning("Stored credential is missing its separator")
        return False

    try:
        salt = base64.b64decode(salt_b64, validate=True)
        expected = base64.b64decode(key_b64, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("Stored credential is not valid base64")
        return False

    if not salt or len(expected) != KEY_BYTES:
        logger.warning("Stored credential has an unexpected length")
        return False

    return hmac.compare_digest(_derive(password, salt), expected)
