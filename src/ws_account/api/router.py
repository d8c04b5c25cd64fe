"""ws_account REST API: profile and balance endpoints, all require JWT authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.ws_account.application.schemas import (
    BalanceSnapshot,
    CheckBalanceRequest,
    RefreshedUser,
    RefreshedUserResponse,
)
from src.ws_account.application.service import AccountService
from src.ws_common.database import get_db_session
from src.ws_gateway.auth.dependencies import AuthUser, get_current_user
from src.ws_gateway.user.schemas import UserProfile
from src.ws_wingy.client import WingyCoinClient, get_wingy_client

router = APIRouter(tags=["account"])

_service = AccountService()


@router.get("/user/profile", response_model=UserProfile)
async def get_profile(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> UserProfile:
    user = await _service.get_profile(db, current_user.id)
    return UserProfile.from_domain(user)


@router.get("/user/{user_id}", response_model=RefreshedUserResponse)
async def refresh_user(
    user_id: int,
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    wingy: Annotated[WingyCoinClient, Depends(get_wingy_client)],
) -> RefreshedUserResponse:
    user = await _service.refresh_profile(db, wingy, current_user.id, user_id)
    return RefreshedUserResponse(user=RefreshedUser.from_domain(user))


@router.post("/check-balance", response_model=BalanceSnapshot)
async def check_balance(
    current_user: Annotated[AuthUser, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    wingy: Annotated[WingyCoinClient, Depends(get_wingy_client)],
    body: CheckBalanceRequest | None = None,
) -> BalanceSnapshot:
    user_id = body.user_id if body is not None else None
    return await _service.check_balance(db, wingy, current_user.id, user_id)
