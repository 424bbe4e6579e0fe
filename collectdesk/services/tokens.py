"""Stateless, expiring session tokens for collectors.

A token is an itsdangerous ``URLSafeSerializer`` payload: the claims are
serialised to compact JSON, signed with HMAC-SHA256 under a dedicated
server secret, and joined as ``payload.signature``.  Nothing is stored
server side; a token is valid while its signature checks out and its
``exp`` claim (epoch milliseconds) is still in the future.
"""

import hashlib
import time
from datetime import timedelta

from itsdangerous import BadData, URLSafeSerializer

from collectdesk.errors import SessionExpired, Unauthenticated

TOKEN_SALT = "collector-session"
DEFAULT_TTL = timedelta(hours=24)


def now_ms() -> int:
    return int(time.time() * 1000)


def _serializer(secret: str) -> URLSafeSerializer:
    if not secret:
        raise ValueError("A token signing secret is required")
    return URLSafeSerializer(
        secret,
        salt=TOKEN_SALT,
        signer_kwargs={"digest_method": hashlib.sha256},
    )


def collector_claims(collector, ttl: timedelta = DEFAULT_TTL, now: int | None = None) -> dict:
    """Build the claims embedded in a collector's session token."""
    issued = now_ms() if now is None else now
    return {
        "collector_id": collector.id,
        "collector_name": collector.name,
        "exp": issued + int(ttl.total_seconds() * 1000),
    }


def issue_token(claims: dict, secret: str) -> str:
    """Sign *claims* and return the token string."""
    return _serializer(secret).dumps(claims)


def load_token(token, secret: str, now: int | None = None) -> dict:
    """Return the claims of a valid token.

    Raises :class:`Unauthenticated` for anything that is not a correctly
    signed claims object, and :class:`SessionExpired` when ``exp`` has
    passed.
    """
    if not token or not isinstance(token, str):
        raise Unauthenticated()

    try:
        claims = _serializer(secret).loads(token)
    except (BadData, ValueError, TypeError):
        raise Unauthenticated()

    if not isinstance(claims, dict):
        raise Unauthenticated()

    exp = claims.get("exp")
    if exp is not None:
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise Unauthenticated()
        if exp < (now_ms() if now is None else now):
            raise SessionExpired()

    return claims


def verify_token(token, secret: str, now: int | None = None) -> dict | None:
    """Return the claims of a valid token, or None if it is invalid or expired."""
    try:
        return load_token(token, secret, now=now)
    except Unauthenticated:
        return None
