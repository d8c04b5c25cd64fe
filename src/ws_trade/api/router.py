"""ws_trade REST API: purchase, confirm, history."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ws_common.database import get_db_session
from src.ws_gateway.auth.dependencies import AuthUser, get_current_user
from src.ws_trade.application.schemas import TransactionCreateRequest, TransactionOut
from src.ws_trade.application.service import TradeService

router = APIRouter(prefix="/transactions", tags=["transactions"])

# Module singleton: the per-product locks must be shared by every request
trade_service = TradeService()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TransactionOut)
async def create_transaction(
    body: TransactionCreateRequest,
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> TransactionOut:
    transaction = await trade_service.create_purchase(db, current_user.id, body.product_id)
    return TransactionOut.from_domain(transaction)


@router.patch("/{transaction_id}/confirm", response_model=TransactionOut)
async def confirm_transaction(
    transaction_id: int,
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> TransactionOut:
    transaction = await trade_service.confirm(db, transaction_id, current_user.id)
    return TransactionOut.from_domain(transaction)


@router.get("/user/{user_id}", response_model=list[TransactionOut])
async def list_user_transactions(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> list[TransactionOut]:
    transactions = await trade_service.list_for_user(db, user_id)
    return [TransactionOut.from_domain(t) for t in transactions]
