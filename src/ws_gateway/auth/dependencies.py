"""FastAPI dependencies: get_current_user, require_admin.

Usage in any protected router:
    from src.ws_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: AuthUser = Depends(get_current_user)):
        ...

get_current_user trusts the signed token and does not touch the database.
require_admin loads the users row, since admin status can change after a
token was issued.
"""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.ws_common.database import get_db_session
from src.ws_common.errors import UnauthenticatedError
from src.ws_gateway.auth.jwt_handler import decode_token
from src.ws_gateway.user.service import AuthService

# auto_error=False: a missing header must be our 401, not FastAPI's 403
_bearer_scheme = HTTPBearer(auto_error=False)
_auth_service = AuthService()


@dataclass(frozen=True)
class AuthUser:
    """Identity decoded from the bearer token."""

    id: int
    username: str


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer_scheme)],
) -> AuthUser:
    """Raises UnauthenticatedError (401) if no token, InvalidTokenError (403) if bad."""
    if credentials is None:
        raise UnauthenticatedError()
    payload = decode_token(credentials.credentials)
    return AuthUser(id=int(payload["sub"]), username=str(payload["username"]))


async def require_admin(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> AuthUser:
    """Raises AdminRequiredError (403) unless the caller's users row has is_admin."""
    await _auth_service.ensure_admin(db, current_user.id)
    return current_user
