"""Transaction settlement: move stock and money once both parties confirmed."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ws_common.cents import cents_to_str
from src.ws_common.errors import (
    InsufficientBalanceError,
    StockExhaustedError,
    UserNotFoundError,
)
from src.ws_store.domain.models import Transaction
from src.ws_store.domain.repository import EntityStoreProtocol

logger = logging.getLogger(__name__)


async def settle_transaction(
    store: EntityStoreProtocol,
    db: AsyncSession,
    transaction: Transaction,
) -> None:
    """Stock -1, buyer -amount, seller +amount, inside the caller's DB transaction.

    Every step is a guarded UPDATE. Any raise leaves partial writes in the
    session; the caller must roll back.
    """
    product = await store.decrement_product_stock(db, transaction.product_id)
    if product is None:
        logger.warning(
            "Transaction %d lost the race for product %d: stock exhausted",
            transaction.id,
            transaction.product_id,
        )
        raise StockExhaustedError(transaction.product_id)

    buyer = await store.adjust_user_balance(db, transaction.buyer_id, -transaction.amount_cents)
    if buyer is None:
        current = await store.get_user(db, transaction.buyer_id)
        if current is None:
            raise UserNotFoundError(transaction.buyer_id)
        raise InsufficientBalanceError(transaction.amount, current.balance)

    seller = await store.adjust_user_balance(db, transaction.seller_id, transaction.amount_cents)
    if seller is None:
        raise UserNotFoundError(transaction.seller_id)

    logger.info(
        "Settled transaction %d: %s from user %d to user %d, product %d stock now %d",
        transaction.id,
        cents_to_str(transaction.amount_cents),
        transaction.buyer_id,
        transaction.seller_id,
        product.id,
        product.stock,
    )
