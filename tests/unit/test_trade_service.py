"""Unit tests for TradeService purchase checks and confirm flow (mocked store)."""

from dataclasses import replace
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from src.ws_common.enums import ConfirmSide
from src.ws_common.errors import (
    AdminRequiredError,
    InsufficientBalanceError,
    NotTransactionPartyError,
    OutOfStockError,
    ProductNotAvailableError,
    ProductNotFoundError,
    SelfPurchaseError,
    StockExhaustedError,
    TransactionNotFoundError,
    UserNotFoundError,
)
from src.ws_store.domain.models import EXTERNAL_AUTH_PASSWORD, Product, Transaction, User
from src.ws_trade.application.service import LOCK_STRIPES, TradeService

_NOW = datetime.now(UTC)

BUYER_ID = 10
SELLER_ID = 20


def _user(user_id: int, balance_cents: int) -> User:
    return User(
        id=user_id,
        username=f"user{user_id}",
        email=f"user{user_id}@example.org",
        password=EXTERNAL_AUTH_PASSWORD,
        balance_cents=balance_cents,
        wingy_balance_milli=0,
        completed_ads=0,
        wingy_coin_user_id=None,
        is_admin=False,
        created_at=_NOW,
    )


def _product(stock: int = 1, status: str = "active", price_cents: int = 1999) -> Product:
    return Product(
        id=5,
        title="Lamp",
        description="Lamp",
        price_cents=price_cents,
        stock=stock,
        image_url=None,
        tags=None,
        seller_id=SELLER_ID,
        status=status,
        created_at=_NOW,
    )


def _transaction(**overrides: object) -> Transaction:
    tx = Transaction(
        id=7,
        product_id=5,
        buyer_id=BUYER_ID,
        seller_id=SELLER_ID,
        amount_cents=1999,
        status="pending",
        buyer_confirmed=False,
        seller_confirmed=False,
        created_at=_NOW,
    )
    return replace(tx, **overrides)  # type: ignore[arg-type]


@pytest.fixture
def mock_db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def store() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def auth() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def service(store: AsyncMock, auth: AsyncMock) -> TradeService:
    return TradeService(store=store, auth=auth)


class TestCreatePurchase:
    async def test_happy_path_snapshots_price(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_product.return_value = _product()
        store.get_user.return_value = _user(BUYER_ID, 5000)
        store.create_transaction.return_value = _transaction()

        tx = await service.create_purchase(mock_db, BUYER_ID, 5)

        data = store.create_transaction.await_args.args[1]
        assert (data.buyer_id, data.seller_id, data.amount_cents) == (BUYER_ID, SELLER_ID, 1999)
        assert tx.status == "pending"
        store.adjust_user_balance.assert_not_awaited()
        store.decrement_product_stock.assert_not_awaited()
        mock_db.commit.assert_awaited_once()

    async def test_missing_product(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_product.return_value = None
        with pytest.raises(ProductNotFoundError):
            await service.create_purchase(mock_db, BUYER_ID, 5)

    @pytest.mark.parametrize("status", ["pending", "rejected"])
    async def test_unmoderated_product_not_purchasable(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock, status: str
    ) -> None:
        store.get_product.return_value = _product(status=status)
        with pytest.raises(ProductNotAvailableError):
            await service.create_purchase(mock_db, BUYER_ID, 5)

    async def test_out_of_stock(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_product.return_value = _product(stock=0)
        with pytest.raises(OutOfStockError):
            await service.create_purchase(mock_db, BUYER_ID, 5)

    async def test_self_purchase(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_product.return_value = _product()
        with pytest.raises(SelfPurchaseError):
            await service.create_purchase(mock_db, SELLER_ID, 5)

    async def test_out_of_stock_checked_before_self_purchase(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_product.return_value = _product(stock=0)
        with pytest.raises(OutOfStockError):
            await service.create_purchase(mock_db, SELLER_ID, 5)

    async def test_buyer_gone(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_product.return_value = _product()
        store.get_user.return_value = None
        with pytest.raises(UserNotFoundError):
            await service.create_purchase(mock_db, BUYER_ID, 5)

    async def test_insufficient_balance(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_product.return_value = _product()
        store.get_user.return_value = _user(BUYER_ID, 1998)
        with pytest.raises(InsufficientBalanceError):
            await service.create_purchase(mock_db, BUYER_ID, 5)
        store.create_transaction.assert_not_awaited()

    async def test_exact_balance_is_enough(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_product.return_value = _product()
        store.get_user.return_value = _user(BUYER_ID, 1999)
        store.create_transaction.return_value = _transaction()
        await service.create_purchase(mock_db, BUYER_ID, 5)
        store.create_transaction.assert_awaited_once()


class TestConfirm:
    async def test_missing_transaction(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_transaction.return_value = None
        with pytest.raises(TransactionNotFoundError):
            await service.confirm(mock_db, 7, BUYER_ID)

    async def test_outsider_forbidden(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_transaction.return_value = _transaction()
        with pytest.raises(NotTransactionPartyError):
            await service.confirm(mock_db, 7, 999)
        store.update_transaction_confirmation.assert_not_awaited()

    async def test_first_confirmation_does_not_settle(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_transaction.return_value = _transaction()
        store.update_transaction_confirmation.return_value = _transaction(buyer_confirmed=True)

        tx = await service.confirm(mock_db, 7, BUYER_ID)

        store.update_transaction_confirmation.assert_awaited_once_with(
            mock_db, 7, ConfirmSide.BUYER, True
        )
        assert tx.buyer_confirmed and not tx.seller_confirmed
        store.decrement_product_stock.assert_not_awaited()
        mock_db.commit.assert_awaited_once()

    async def test_second_confirmation_settles(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        completed = _transaction(
            buyer_confirmed=True, seller_confirmed=True, status="completed", completed_at=_NOW
        )
        store.get_transaction.return_value = _transaction(buyer_confirmed=True)
        store.update_transaction_confirmation.return_value = completed
        store.decrement_product_stock.return_value = _product(stock=0)
        store.adjust_user_balance.side_effect = [_user(BUYER_ID, 3001), _user(SELLER_ID, 1999)]

        tx = await service.confirm(mock_db, 7, SELLER_ID)

        assert tx.status == "completed"
        store.decrement_product_stock.assert_awaited_once_with(mock_db, 5)
        assert [c.args[1:] for c in store.adjust_user_balance.await_args_list] == [
            (BUYER_ID, -1999),
            (SELLER_ID, 1999),
        ]
        mock_db.commit.assert_awaited_once()

    async def test_completed_transaction_returned_unchanged(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        completed = _transaction(
            buyer_confirmed=True, seller_confirmed=True, status="completed", completed_at=_NOW
        )
        store.get_transaction.return_value = completed

        tx = await service.confirm(mock_db, 7, BUYER_ID)

        assert tx is completed
        store.update_transaction_confirmation.assert_not_awaited()
        store.adjust_user_balance.assert_not_awaited()

    async def test_stock_exhausted_rolls_back(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_transaction.return_value = _transaction(buyer_confirmed=True)
        store.update_transaction_confirmation.return_value = _transaction(
            buyer_confirmed=True, seller_confirmed=True, status="completed", completed_at=_NOW
        )
        store.decrement_product_stock.return_value = None

        with pytest.raises(StockExhaustedError):
            await service.confirm(mock_db, 7, SELLER_ID)
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()
        store.adjust_user_balance.assert_not_awaited()

    async def test_failed_debit_rolls_back(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_transaction.return_value = _transaction(seller_confirmed=True)
        store.update_transaction_confirmation.return_value = _transaction(
            buyer_confirmed=True, seller_confirmed=True, status="completed", completed_at=_NOW
        )
        store.decrement_product_stock.return_value = _product(stock=0)
        store.adjust_user_balance.return_value = None
        store.get_user.return_value = _user(BUYER_ID, 500)

        with pytest.raises(InsufficientBalanceError, match="5.00"):
            await service.confirm(mock_db, 7, BUYER_ID)
        mock_db.rollback.assert_awaited_once()
        mock_db.commit.assert_not_awaited()

    async def test_lost_race_returns_current_record(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        completed = _transaction(
            buyer_confirmed=True, seller_confirmed=True, status="completed", completed_at=_NOW
        )
        store.get_transaction.side_effect = [_transaction(), completed]
        store.update_transaction_confirmation.return_value = None

        tx = await service.confirm(mock_db, 7, BUYER_ID)

        assert tx == completed
        store.decrement_product_stock.assert_not_awaited()

    async def test_lock_pool_does_not_grow_with_products(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.update_transaction_confirmation.return_value = _transaction(buyer_confirmed=True)
        for product_id in range(1, 3 * LOCK_STRIPES):
            store.get_transaction.return_value = _transaction(product_id=product_id)
            await service.confirm(mock_db, 7, BUYER_ID)

        assert len(service._product_locks) == LOCK_STRIPES
        assert service._lock_for(5) is service._lock_for(5 + LOCK_STRIPES)
        assert not any(lock.locked() for lock in service._product_locks)


class TestListings:
    async def test_list_all_requires_admin(
        self, service: TradeService, store: AsyncMock, auth: AsyncMock, mock_db: AsyncMock
    ) -> None:
        auth.ensure_admin.side_effect = AdminRequiredError()
        with pytest.raises(AdminRequiredError):
            await service.list_all(mock_db, BUYER_ID)
        store.get_transactions.assert_not_awaited()

    async def test_list_for_user(
        self, service: TradeService, store: AsyncMock, mock_db: AsyncMock
    ) -> None:
        store.get_transactions_by_user.return_value = [_transaction()]
        result = await service.list_for_user(mock_db, BUYER_ID)
        assert len(result) == 1
        store.get_transactions_by_user.assert_awaited_once_with(mock_db, BUYER_ID)
