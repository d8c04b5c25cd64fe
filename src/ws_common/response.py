"""Shared response shapes.

Success bodies are returned bare (the web client reads them directly).
Errors always use the envelope below:
{
    "code": 4002,
    "message": "Product out of stock",
    "data": null,
    "timestamp": "...",
    "request_id": "..."
}
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base for request/response bodies: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(ApiModel):
    """Request bodies reject unknown fields."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )


class ErrorResponse(BaseModel):
    code: int
    message: str
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def error_response(code: int, message: str, request_id: str | None = None) -> ErrorResponse:
    resp = ErrorResponse(code=code, message=message)
    if request_id is not None:
        resp.request_id = request_id
    return resp


# Coin amounts are Decimal in Python and a JSON number on the wire
CoinAmount = Annotated[
    Decimal,
    PlainSerializer(lambda d: float(d), return_type=float, when_used="json"),
]
