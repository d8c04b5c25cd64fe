"""Authentication service: signup, login, admin check.

Credentials live in the Wingy Coin ledger. This service only maps a ledger
account onto a local users row and issues the local session token.
Each write path commits the caller's session itself and rolls back on error.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ws_common.cents import coins_to_milli
from src.ws_common.errors import (
    AdminRequiredError,
    AuthError,
    EmailExistsError,
    GatewayError,
    ServerError,
    UsernameExistsError,
)
from src.ws_gateway.auth.jwt_handler import create_access_token
from src.ws_gateway.user.username import username_base_from_email, validate_username
from src.ws_store.domain.models import NewUser, User
from src.ws_store.domain.repository import EntityStoreProtocol
from src.ws_store.infrastructure.persistence import EntityStore
from src.ws_wingy.client import WingyCoinClient
from src.ws_wingy.schemas import WingyUser

logger = logging.getLogger(__name__)

# Ledger error texts that mean "wrong email/password", not "ledger is broken"
_BAD_CREDENTIAL_MARKERS = ("invalid login credentials", "invalid email or password")


def _is_bad_credentials(message: str) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in _BAD_CREDENTIAL_MARKERS)


def _owned_by(user: User, wingy_coin_user_id: str) -> bool:
    """A row is reusable only if unlinked or already linked to this ledger account."""
    return user.wingy_coin_user_id is None or user.wingy_coin_user_id == wingy_coin_user_id


class AuthService:
    """Stateless; one instance is shared across requests."""

    def __init__(self, store: EntityStoreProtocol | None = None) -> None:
        self._store: EntityStoreProtocol = store or EntityStore()

    async def signup(
        self,
        db: AsyncSession,
        wingy: WingyCoinClient,
        email: str,
        password: str,
        username: str,
    ) -> tuple[User, str]:
        """Create the ledger account, then create or reuse the local user.

        Returns (user, session_token). Ledger rejections are GatewayError 401.
        A local row already linked to a different ledger account is never
        reused: UsernameExistsError / EmailExistsError (409).
        """
        username = validate_username(username)

        try:
            response = await wingy.signup(email, password, username)
        except GatewayError as e:
            raise GatewayError(e.message, http_status=401) from e
        if not response.userId:
            raise GatewayError(response.message or "Failed to sign up", http_status=401)

        try:
            user = await self._store.get_user_by_username(db, username)
            if user is not None and not _owned_by(user, response.userId):
                raise UsernameExistsError()
            if user is None:
                user = await self._store.get_user_by_email(db, email)
                if user is not None and not _owned_by(user, response.userId):
                    raise EmailExistsError()
            if user is None:
                user = await self._store.create_user(
                    db,
                    NewUser(
                        username=username,
                        email=email,
                        wingy_coin_user_id=response.userId,
                    ),
                )
                logger.info("Created local user %d for ledger account %s", user.id, response.userId)
            elif user.wingy_coin_user_id is None:
                linked = await self._store.update_user_wingy_coin_id(db, user.id, response.userId)
                user = linked or user
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        return user, create_access_token(user.id, user.username)

    async def login(
        self,
        db: AsyncSession,
        wingy: WingyCoinClient,
        email: str,
        password: str,
    ) -> tuple[User, str, WingyUser]:
        """Check credentials with the ledger and resolve (or provision) the local user.

        Returns (user, session_token, ledger_user).
        Raises AuthError for bad credentials, ServerError for any other ledger failure.
        """
        try:
            response = await wingy.login(email, password)
        except GatewayError as e:
            if _is_bad_credentials(e.message):
                raise AuthError() from e
            raise ServerError(e.message) from e
        if response.user is None:
            raise AuthError("Invalid email or password")

        ledger_user = response.user
        try:
            user = await self._store.get_user_by_email(db, ledger_user.email)
            if user is None:
                username = await self._free_username(db, ledger_user.email)
                user = await self._store.create_user(
                    db,
                    NewUser(
                        username=username,
                        email=ledger_user.email,
                        wingy_coin_user_id=ledger_user.id,
                    ),
                )
                logger.info("Provisioned local user %d (%s) on first login", user.id, username)
            elif user.wingy_coin_user_id is None:
                linked = await self._store.update_user_wingy_coin_id(db, user.id, ledger_user.id)
                user = linked or user

            if ledger_user.wingy is not None or ledger_user.completedads is not None:
                mirrored = await self._store.update_user_wingy_balance(
                    db,
                    user.id,
                    coins_to_milli(ledger_user.wingy)
                    if ledger_user.wingy is not None
                    else user.wingy_balance_milli,
                    ledger_user.completedads
                    if ledger_user.completedads is not None
                    else user.completed_ads,
                )
                user = mirrored or user
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        return user, create_access_token(user.id, user.username), ledger_user

    async def ensure_admin(self, db: AsyncSession, user_id: int) -> User:
        """Return the admin's users row or raise AdminRequiredError."""
        user = await self._store.get_user(db, user_id)
        if user is None or not user.is_admin:
            raise AdminRequiredError()
        return user

    async def _free_username(self, db: AsyncSession, email: str) -> str:
        base = username_base_from_email(email)
        candidate = base
        suffix = 1
        while await self._store.get_user_by_username(db, candidate) is not None:
            suffix += 1
            candidate = f"{base}{suffix}"
        return candidate
