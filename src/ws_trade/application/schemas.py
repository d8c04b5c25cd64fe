"""Pydantic schemas for ws_trade."""

from datetime import datetime

from src.ws_common.response import ApiModel, RequestModel
from src.ws_store.domain.models import Transaction


class TransactionCreateRequest(RequestModel):
    product_id: int


class TransactionOut(ApiModel):
    id: int
    product_id: int
    buyer_id: int
    seller_id: int
    amount: str
    status: str
    buyer_confirmed: bool
    seller_confirmed: bool
    created_at: datetime
    completed_at: datetime | None

    @classmethod
    def from_domain(cls, transaction: Transaction) -> "TransactionOut":
        return cls(
            id=transaction.id,
            product_id=transaction.product_id,
            buyer_id=transaction.buyer_id,
            seller_id=transaction.seller_id,
            amount=transaction.amount,
            status=transaction.status,
            buyer_confirmed=transaction.buyer_confirmed,
            seller_confirmed=transaction.seller_confirmed,
            created_at=transaction.created_at,
            completed_at=transaction.completed_at,
        )
