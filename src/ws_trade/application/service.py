"""TradeService: purchase creation and the two-party confirmation protocol.

A purchase only records intent (pending, price snapshotted). Nothing moves
until both buyer and seller confirm; the confirmation that completes the
transaction also settles it, in the same DB transaction.

Concurrency: confirm() holds the product's asyncio.Lock (one of a fixed pool)
across the confirmation + settlement unit, so completions for the same
product run one at a time in this process. Across processes the row guards
in EntityStore (status = 'pending', stock > 0, balance + delta >= 0) give the
same result.
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ws_common.cents import cents_to_str
from src.ws_common.enums import ProductStatus, TransactionStatus
from src.ws_common.errors import (
    InsufficientBalanceError,
    NotTransactionPartyError,
    OutOfStockError,
    ProductNotAvailableError,
    ProductNotFoundError,
    SelfPurchaseError,
    TransactionNotFoundError,
    UserNotFoundError,
)
from src.ws_gateway.user.service import AuthService
from src.ws_store.domain.models import NewTransaction, Transaction
from src.ws_store.domain.repository import EntityStoreProtocol
from src.ws_store.infrastructure.persistence import EntityStore
from src.ws_trade.domain.settlement import settle_transaction

logger = logging.getLogger(__name__)

# Products hash onto a fixed pool of locks; two products may share one
LOCK_STRIPES = 64


class TradeService:
    def __init__(
        self,
        store: EntityStoreProtocol | None = None,
        auth: AuthService | None = None,
    ) -> None:
        self._store: EntityStoreProtocol = store or EntityStore()
        self._auth = auth or AuthService(self._store)
        self._product_locks = [asyncio.Lock() for _ in range(LOCK_STRIPES)]

    async def create_purchase(
        self, db: AsyncSession, buyer_id: int, product_id: int
    ) -> Transaction:
        product = await self._store.get_product(db, product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        if product.status != ProductStatus.ACTIVE.value:
            raise ProductNotAvailableError(product_id, product.status)
        if product.stock <= 0:
            raise OutOfStockError()
        if product.seller_id == buyer_id:
            raise SelfPurchaseError()

        buyer = await self._store.get_user(db, buyer_id)
        if buyer is None:
            raise UserNotFoundError(buyer_id)
        if buyer.balance_cents < product.price_cents:
            raise InsufficientBalanceError(product.price, buyer.balance)

        try:
            transaction = await self._store.create_transaction(
                db,
                NewTransaction(
                    product_id=product.id,
                    buyer_id=buyer_id,
                    seller_id=product.seller_id,
                    amount_cents=product.price_cents,
                ),
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "User %d opened transaction %d for product %d at %s",
            buyer_id,
            transaction.id,
            product.id,
            cents_to_str(transaction.amount_cents),
        )
        return transaction

    async def confirm(
        self, db: AsyncSession, transaction_id: int, acting_user_id: int
    ) -> Transaction:
        """Record the actor's confirmation; settle if it was the second one.

        Confirming a completed or cancelled transaction returns it unchanged.
        On any settlement failure the whole unit rolls back, the completing
        confirmation included, and the error propagates.
        """
        transaction = await self._store.get_transaction(db, transaction_id)
        if transaction is None:
            raise TransactionNotFoundError(transaction_id)
        side = transaction.party_of(acting_user_id)
        if side is None:
            raise NotTransactionPartyError()
        if transaction.status != TransactionStatus.PENDING.value:
            return transaction

        async with self._lock_for(transaction.product_id):
            try:
                updated = await self._store.update_transaction_confirmation(
                    db, transaction_id, side, True
                )
                if updated is not None and updated.status == TransactionStatus.COMPLETED.value:
                    await settle_transaction(self._store, db, updated)
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        if updated is None:
            # Completed or cancelled by someone else after our first read
            current = await self._store.get_transaction(db, transaction_id)
            return current or transaction
        return updated

    def _lock_for(self, product_id: int) -> asyncio.Lock:
        return self._product_locks[product_id % LOCK_STRIPES]

    async def list_for_user(self, db: AsyncSession, user_id: int) -> list[Transaction]:
        return await self._store.get_transactions_by_user(db, user_id)

    async def list_all(self, db: AsyncSession, admin_id: int) -> list[Transaction]:
        await self._auth.ensure_admin(db, admin_id)
        return await self._store.get_transactions(db)
