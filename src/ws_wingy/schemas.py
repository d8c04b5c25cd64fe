"""Pydantic models for Wingy Coin ledger payloads.

Field names follow the ledger's JSON exactly (lowercase, no camelCase).
Unknown fields are ignored so additive upstream changes do not break us.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class _LedgerModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class WingyUser(_LedgerModel):
    id: str
    email: str
    completedads: int | None = None
    discordid: str | None = None
    invitecode: str | None = None
    inviter_rewarded: bool | None = None
    phoneverified: str | None = None
    successfullinvites: int | None = None
    wingy: Decimal | None = None


class WingyLoginResponse(_LedgerModel):
    user: WingyUser | None = None


class WingySignupResponse(_LedgerModel):
    userId: str | None = None  # noqa: N815  (ledger field name)
    message: str | None = None


class WingyBalance(_LedgerModel):
    wingy: Decimal
    completedads: int
