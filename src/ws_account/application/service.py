"""AccountService: profile reads and balance sync with the Wingy Coin ledger.

The ledger is authoritative for coin balances; users.wingy_balance_milli and
users.completed_ads are a mirror. Read paths try the ledger first and fall
back to the mirror when the user is unlinked or the ledger call fails.
A successful ledger read is written back to the mirror and committed.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ws_account.application.schemas import BalanceSnapshot
from src.ws_common.cents import coins_to_milli
from src.ws_common.errors import AdminRequiredError, ForbiddenError, GatewayError, UserNotFoundError
from src.ws_store.domain.models import User
from src.ws_store.domain.repository import EntityStoreProtocol
from src.ws_store.infrastructure.persistence import EntityStore
from src.ws_wingy.client import WingyCoinClient

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, store: EntityStoreProtocol | None = None) -> None:
        self._store: EntityStoreProtocol = store or EntityStore()

    async def get_profile(self, db: AsyncSession, user_id: int) -> User:
        user = await self._store.get_user(db, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def refresh_profile(
        self,
        db: AsyncSession,
        wingy: WingyCoinClient,
        caller_id: int,
        user_id: int,
    ) -> User:
        """Re-read the caller's coin balance from the ledger. Only for oneself."""
        if caller_id != user_id:
            raise ForbiddenError()
        user = await self.get_profile(db, user_id)
        refreshed, _ = await self._sync_from_ledger(db, wingy, user)
        return refreshed

    async def check_balance(
        self,
        db: AsyncSession,
        wingy: WingyCoinClient,
        caller_id: int,
        user_id: int | None = None,
    ) -> BalanceSnapshot:
        """Coin balance of user_id (default: the caller). Others' balances need admin."""
        target_id = user_id if user_id is not None else caller_id
        if target_id != caller_id:
            caller = await self._store.get_user(db, caller_id)
            if caller is None or not caller.is_admin:
                raise AdminRequiredError()

        user = await self.get_profile(db, target_id)
        refreshed, stale = await self._sync_from_ledger(db, wingy, user)
        return BalanceSnapshot.from_mirror(refreshed, stale)

    async def _sync_from_ledger(
        self, db: AsyncSession, wingy: WingyCoinClient, user: User
    ) -> tuple[User, bool]:
        """Returns (user, stale). stale=True means the mirror was not refreshed."""
        if user.wingy_coin_user_id is None:
            return user, True

        try:
            balance = await wingy.check_balance(user.wingy_coin_user_id)
        except GatewayError as e:
            logger.warning(
                "Ledger balance read failed for user %d, serving mirror: %s",
                user.id,
                e.message,
            )
            return user, True

        try:
            updated = await self._store.update_user_wingy_balance(
                db, user.id, coins_to_milli(balance.wingy), balance.completedads
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return (updated or user), False
