"""Session token helpers built on signed JWTs."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from dongne_board.core.settings import settings


def create_session_token(open_id: str, name: str = "", expires_in: timedelta | None = None) -> str:
    """Create the signed token stored in the session cookie.

    Args:
        open_id: Stable external identifier of the user.
        name: Display name embedded for client convenience.
        expires_in: Token lifetime; defaults to the configured session lifetime.

    Returns:
        Encoded JWT string.
    """
    lifetime = expires_in or timedelta(days=settings.session_expire_days)
    claims: dict[str, object] = {
        "sub": open_id,
        "name": name,
        "exp": datetime.now(UTC) + lifetime,
    }
    encoded: str = jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)
    return encoded


def verify_session_token(token: str | None) -> str | None:
    """Return the open id carried by a valid token, or None."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        return None
    return subject
