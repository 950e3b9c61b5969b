"""Bearer token helpers.

Tokens are issued by the authentication service; this module only needs to
mint them for tooling and tests and to read the subject back.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from edloop.core.settings import settings


def create_access_token(user_id: str) -> str:
    """Create a JWT access token whose subject is ``user_id``."""
    to_encode: dict[str, object] = {"sub": user_id}
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> str | None:
    """Return the ``sub`` claim of a valid token, or ``None`` if it is invalid."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) else None
