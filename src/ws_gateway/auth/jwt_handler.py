"""Session token creation and verification.

Tokens are HS256 JWTs signed with JWT_SECRET and carry the LOCAL user id
(sub) plus the username. The Wingy Coin ledger never sees them; they only
bind a browser session to a local users row.

MVP NOTE: No token revocation. Once issued, tokens are valid until expiry.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from config.settings import settings
from src.ws_common.errors import InvalidTokenError

_ALGORITHM = settings.JWT_ALGORITHM  # "HS256"
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)


def create_access_token(user_id: int, username: str) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": str(user_id),  # jose requires a string subject
        "username": username,
        "type": "access",
        "iat": now,
        "exp": now + _ACCESS_EXPIRE,
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a session token.

    Returns:
        Payload with "sub" (local user id as str), "username" and "type".

    Raises:
        InvalidTokenError: bad signature, expired, wrong type, or missing claims.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],  # Explicit list prevents algorithm confusion
        )
    except JWTError:
        raise InvalidTokenError() from None

    if payload.get("type") != "access":
        raise InvalidTokenError()
    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub.isdigit() or not payload.get("username"):
        raise InvalidTokenError()
    return payload
