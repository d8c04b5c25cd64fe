"""Pydantic schemas for ws_account."""

from pydantic import BaseModel

from src.ws_common.response import CoinAmount, RequestModel
from src.ws_gateway.user.schemas import UserProfile
from src.ws_store.domain.models import User


class CheckBalanceRequest(RequestModel):
    # Local user id; omitted means "my own balance"
    user_id: int | None = None


class BalanceSnapshot(BaseModel):
    """Coin balance in the ledger's field names.

    stale is true when the local mirror was served instead of a fresh read.
    """

    wingy: CoinAmount
    completedads: int
    stale: bool = False

    @classmethod
    def from_mirror(cls, user: User, stale: bool) -> "BalanceSnapshot":
        return cls(wingy=user.wingy_balance, completedads=user.completed_ads, stale=stale)


class RefreshedUser(UserProfile):
    """Profile plus the freshly read ledger figures (ledger field names)."""

    wingy: CoinAmount
    completedads: int

    @classmethod
    def from_domain(cls, user: User) -> "RefreshedUser":
        return cls(
            **UserProfile.from_domain(user).model_dump(),
            wingy=user.wingy_balance,
            completedads=user.completed_ads,
        )


class RefreshedUserResponse(BaseModel):
    user: RefreshedUser
