"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from config.settings import settings
from src.ws_account.api.router import router as account_router
from src.ws_admin.api.router import router as admin_router
from src.ws_common.database import engine, ping_database
from src.ws_common.errors import AppError, ServerError, ValidationError
from src.ws_common.response import error_response
from src.ws_gateway.api.router import router as auth_router
from src.ws_gateway.middleware.request_log import RequestLogMiddleware
from src.ws_market.api.router import router as market_router
from src.ws_trade.api.router import router as trade_router

APP_VERSION = "0.1.0"

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify the DB connection. Shutdown: dispose the pool."""
    await ping_database()
    logger.info("%s %s started", settings.APP_NAME, APP_VERSION)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=APP_VERSION,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _envelope(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, getattr(request.state, "request_id", None))
    return JSONResponse(status_code=exc.http_status, content=resp.model_dump())


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _envelope(request, exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first['msg']}" if location else str(first["msg"])
    else:
        message = "Invalid request"
    return _envelope(request, ValidationError(message))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(request, ServerError())


app.include_router(auth_router, prefix="/api")
app.include_router(account_router, prefix="/api")
app.include_router(market_router, prefix="/api")
app.include_router(trade_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": APP_VERSION}
