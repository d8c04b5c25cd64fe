"""Pydantic request/response schemas for ws_gateway.

Wire format is camelCase (ApiModel); the embedded ledger metadata keeps the
ledger's own lowercase field names.
"""

from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field

from src.ws_common.response import ApiModel, CoinAmount, RequestModel
from src.ws_store.domain.models import User
from src.ws_wingy.schemas import WingyUser


class RegisterRequest(RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    # Length/charset/forbidden-word rules live in username.validate_username
    username: str = Field(..., min_length=1, max_length=64)


class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class UserProfile(ApiModel):
    """Local mirror of a user, as shown to that user."""

    id: int
    username: str
    email: str
    balance: str
    is_admin: bool
    wingy_coin_user_id: str | None
    wingy_balance: CoinAmount
    completed_ads: int

    @classmethod
    def from_domain(cls, user: User) -> "UserProfile":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            balance=user.balance,
            is_admin=user.is_admin,
            wingy_coin_user_id=user.wingy_coin_user_id,
            wingy_balance=user.wingy_balance,
            completed_ads=user.completed_ads,
        )


class WingyUserMetadata(BaseModel):
    """Ledger account details echoed back on login (ledger field names)."""

    email: str
    username: str
    completedads: int = 0
    discordid: str = "unverified"
    invitecode: str = ""
    inviter_rewarded: bool = False
    phoneverified: str = "unverified"
    successfullinvites: int = 0
    wingy: CoinAmount = Decimal(0)

    @classmethod
    def from_ledger(cls, wingy_user: WingyUser, username: str) -> "WingyUserMetadata":
        return cls(
            email=wingy_user.email,
            username=username,
            completedads=wingy_user.completedads or 0,
            discordid=wingy_user.discordid or "unverified",
            invitecode=wingy_user.invitecode or "",
            inviter_rewarded=wingy_user.inviter_rewarded or False,
            phoneverified=wingy_user.phoneverified or "unverified",
            successfullinvites=wingy_user.successfullinvites or 0,
            wingy=wingy_user.wingy if wingy_user.wingy is not None else Decimal(0),
        )


class LoginUser(UserProfile):
    user_metadata: WingyUserMetadata = Field(..., alias="user_metadata")


class AuthResponse(ApiModel):
    token: str
    user: UserProfile


class LoginResponse(ApiModel):
    token: str
    user: LoginUser
