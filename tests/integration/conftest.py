"""Integration-test fixtures.

The FastAPI app runs in-process over httpx.ASGITransport. Two dependencies
are overridden: get_db_session (per-test SQLite file) and get_wingy_client
(a WingyCoinClient whose transport is the in-memory FakeLedger below).
"""

import json
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.main import app
from src.ws_common.database import get_db_session
from src.ws_store.domain.models import NewUser
from src.ws_store.infrastructure.persistence import EntityStore
from src.ws_wingy.client import WingyCoinClient, get_wingy_client


@dataclass
class LedgerAccount:
    id: str
    email: str
    password: str
    username: str
    wingy: Decimal = Decimal(0)
    completedads: int = 0


class FakeLedger:
    """Just enough of the Wingy Coin API: /signup, /login, /check-balance."""

    def __init__(self) -> None:
        self.accounts: dict[str, LedgerAccount] = {}
        self.down = False

    def add(self, email: str, password: str, username: str, wingy: str = "0") -> LedgerAccount:
        account = LedgerAccount(
            id=f"w-{uuid.uuid4().hex[:8]}",
            email=email,
            password=password,
            username=username,
            wingy=Decimal(wingy),
        )
        self.accounts[email] = account
        return account

    def handle(self, request: httpx.Request) -> httpx.Response:
        if self.down:
            return httpx.Response(503, text="Service Unavailable")
        body: dict[str, Any] = json.loads(request.content or b"{}")

        if request.url.path == "/signup":
            if body["email"] in self.accounts:
                return httpx.Response(400, text="User already registered")
            account = self.add(body["email"], body["password"], body["username"])
            return httpx.Response(200, json={"userId": account.id, "message": "Signed up"})

        if request.url.path == "/login":
            account = self.accounts.get(body["email"])
            if account is None or account.password != body["password"]:
                return httpx.Response(400, text="Invalid login credentials")
            return httpx.Response(
                200,
                json={
                    "user": {
                        "id": account.id,
                        "email": account.email,
                        "wingy": float(account.wingy),
                        "completedads": account.completedads,
                        "discordid": "unverified",
                        "invitecode": "ABC123",
                    }
                },
            )

        if request.url.path == "/check-balance":
            for account in self.accounts.values():
                if account.id == body["userId"]:
                    return httpx.Response(
                        200,
                        json={"wingy": float(account.wingy), "completedads": account.completedads},
                    )
            return httpx.Response(404, text="User not found")

        return httpx.Response(404, text="Not found")


@pytest.fixture
def ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession], ledger: FakeLedger
) -> AsyncGenerator[AsyncClient, None]:
    async def _db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    wingy = WingyCoinClient(
        base_url="https://ledger.test", timeout=1.0, transport=httpx.MockTransport(ledger.handle)
    )
    app.dependency_overrides[get_db_session] = _db
    app.dependency_overrides[get_wingy_client] = lambda: wingy

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@dataclass
class Member:
    id: int
    username: str
    email: str
    headers: dict[str, str]


@pytest.fixture
def member(
    client: AsyncClient,
    ledger: FakeLedger,
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[Member]]:
    """Factory: a local user with a cents balance, logged in through the API."""
    store = EntityStore()

    async def _make(username: str, balance_cents: int = 0, is_admin: bool = False) -> Member:
        email = f"{username}@example.org"
        account = ledger.add(email, "secret", username)
        async with session_factory() as session:
            await store.create_user(
                session,
                NewUser(
                    username=username,
                    email=email,
                    balance_cents=balance_cents,
                    is_admin=is_admin,
                    wingy_coin_user_id=account.id,
                ),
            )
            await session.commit()

        resp = await client.post("/api/auth/login", json={"email": email, "password": "secret"})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        return Member(
            id=body["user"]["id"],
            username=username,
            email=email,
            headers={"Authorization": f"Bearer {body['token']}"},
        )

    return _make
