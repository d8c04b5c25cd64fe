"""HTTP client for the Wingy Coin ledger.

The ledger is the source of truth for credentials and coin balances. Three
calls are exposed: login, signup and check-balance. The client is stateless
(one httpx.AsyncClient per call) so it is safe to share across requests.

Every failure surfaces as GatewayError: non-2xx status (message = upstream
body text), timeout, transport error, or a body that does not parse.
No retries; callers decide whether a failure is fatal.
"""

import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel

from config.settings import settings
from src.ws_common.errors import GatewayError
from src.ws_wingy.schemas import WingyBalance, WingyLoginResponse, WingySignupResponse

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class WingyCoinClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = (base_url or settings.WINGY_API_BASE_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.WINGY_API_TIMEOUT_SECONDS
        self._transport = transport

    async def login(self, email: str, password: str) -> WingyLoginResponse:
        return await self._post(
            "/login",
            {"email": email, "password": password},
            WingyLoginResponse,
        )

    async def signup(self, email: str, password: str, username: str) -> WingySignupResponse:
        return await self._post(
            "/signup",
            {"email": email, "password": password, "username": username.lower()},
            WingySignupResponse,
        )

    async def check_balance(self, wingy_user_id: str) -> WingyBalance:
        return await self._post(
            "/check-balance",
            {"userId": wingy_user_id},
            WingyBalance,
        )

    async def _post(
        self, endpoint: str, payload: dict[str, Any], model: type[_ModelT]
    ) -> _ModelT:
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(endpoint, json=payload)
        except httpx.TimeoutException as e:
            raise GatewayError(f"Wingy Coin API timed out on {endpoint}") from e
        except httpx.HTTPError as e:
            raise GatewayError(f"Wingy Coin API unreachable: {e}") from e

        logger.debug("Wingy Coin %s -> %d", endpoint, response.status_code)

        if not response.is_success:
            detail = response.text or f"HTTP {response.status_code}: {response.reason_phrase}"
            raise GatewayError(detail)

        try:
            # json errors and pydantic validation errors are both ValueErrors
            return model.model_validate(response.json())
        except ValueError as e:
            raise GatewayError(f"Malformed response from Wingy Coin API on {endpoint}") from e


wingy_client = WingyCoinClient()


def get_wingy_client() -> WingyCoinClient:
    """FastAPI dependency: the process-wide ledger client (overridden in tests)."""
    return wingy_client
