"""Issue and verify HS256 bearer tokens."""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt


class InvalidTokenError(Exception):
    """Raised when a token is malformed, forged or expired."""


def create_access_token(
    claims: dict[str, Any],
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = 60,
) -> str:
    """Sign a token carrying ``claims`` plus issue and expiry times.

    Args:
        claims: Payload claims (``id``, ``email``, ``role``)
        secret: Signing secret
        algorithm: JWT signing algorithm
        expires_minutes: Lifetime of the token

    Returns:
        Encoded JWT
    """
    now = datetime.now(UTC)
    payload = {**claims, "iat": now, "exp": now + timedelta(minutes=expires_minutes)}
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(
    token: str,
    secret: str,
    algorithm: str = "HS256",
) -> dict[str, Any]:
    """Verify a token's signature and expiry and return its claims.

    Raises:
        InvalidTokenError: If the token cannot be verified
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.PyJWTError as e:
        raise InvalidTokenError(str(e)) from e
