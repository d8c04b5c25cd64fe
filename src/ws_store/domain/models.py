"""Domain records for ws_store: frozen dataclasses, no SQLAlchemy dependency.

Records are immutable snapshots. Every store mutator hands back a new
snapshot instead of touching one the caller already holds.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.ws_common.cents import cents_to_str, milli_to_coins
from src.ws_common.enums import ConfirmSide

EXTERNAL_AUTH_PASSWORD = "external-auth"


@dataclass(frozen=True)
class User:
    id: int
    username: str
    email: str
    password: str
    balance_cents: int            # local legacy balance
    wingy_balance_milli: int      # mirror of the ledger's coin balance
    completed_ads: int
    wingy_coin_user_id: str | None
    is_admin: bool
    created_at: datetime

    @property
    def balance(self) -> str:
        return cents_to_str(self.balance_cents)

    @property
    def wingy_balance(self) -> Decimal:
        return milli_to_coins(self.wingy_balance_milli)


@dataclass(frozen=True)
class Product:
    id: int
    title: str
    description: str
    price_cents: int
    stock: int
    image_url: str | None
    tags: tuple[str, ...] | None
    seller_id: int
    status: str                   # ProductStatus value
    created_at: datetime

    @property
    def price(self) -> str:
        return cents_to_str(self.price_cents)


@dataclass(frozen=True)
class Transaction:
    id: int
    product_id: int
    buyer_id: int
    seller_id: int
    amount_cents: int             # price snapshot taken at purchase time
    status: str                   # TransactionStatus value
    buyer_confirmed: bool
    seller_confirmed: bool
    created_at: datetime
    completed_at: datetime | None = None

    @property
    def amount(self) -> str:
        return cents_to_str(self.amount_cents)

    def party_of(self, user_id: int) -> ConfirmSide | None:
        """Which side user_id is on, or None when it is not a party."""
        if user_id == self.buyer_id:
            return ConfirmSide.BUYER
        if user_id == self.seller_id:
            return ConfirmSide.SELLER
        return None


# ---------------------------------------------------------------------------
# Insert payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NewUser:
    username: str
    email: str
    password: str = EXTERNAL_AUTH_PASSWORD
    wingy_coin_user_id: str | None = None
    balance_cents: int = 0
    is_admin: bool = False


@dataclass(frozen=True)
class NewProduct:
    title: str
    description: str
    price_cents: int
    stock: int | None = None
    image_url: str | None = None
    tags: tuple[str, ...] | None = None


@dataclass(frozen=True)
class NewTransaction:
    product_id: int
    buyer_id: int
    seller_id: int
    amount_cents: int
