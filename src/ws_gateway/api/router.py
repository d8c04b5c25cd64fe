"""Auth API router: register, login.

Both endpoints return {token, user}. The ledger client is injected through
get_wingy_client so tests can swap in a fake ledger.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ws_common.database import get_db_session
from src.ws_gateway.user.schemas import (
    AuthResponse,
    LoginRequest,
    LoginResponse,
    LoginUser,
    RegisterRequest,
    UserProfile,
    WingyUserMetadata,
)
from src.ws_gateway.user.service import AuthService
from src.ws_wingy.client import WingyCoinClient, get_wingy_client

router = APIRouter(prefix="/auth", tags=["auth"])
_service = AuthService()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=AuthResponse,
    summary="Sign up with the Wingy Coin ledger",
)
async def register(
    body: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    wingy: Annotated[WingyCoinClient, Depends(get_wingy_client)],
) -> AuthResponse:
    user, token = await _service.signup(db, wingy, body.email, body.password, body.username)
    return AuthResponse(token=token, user=UserProfile.from_domain(user))


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=LoginResponse,
    summary="Log in with Wingy Coin credentials",
)
async def login(
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    wingy: Annotated[WingyCoinClient, Depends(get_wingy_client)],
) -> LoginResponse:
    user, token, ledger_user = await _service.login(db, wingy, body.email, body.password)
    profile = UserProfile.from_domain(user)
    return LoginResponse(
        token=token,
        user=LoginUser(
            **profile.model_dump(),
            user_metadata=WingyUserMetadata.from_ledger(ledger_user, user.username),
        ),
    )
