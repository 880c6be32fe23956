import uuid
from dataclasses import dataclass

from fastapi import Request

from services.clock import to_iso, utcnow

CORRELATION_HEADERS = (
    "x-correlation-id",
    "x-fapi-interaction-id",
    "x-request-id",
)

RESPONSE_HEADER = "X-Correlation-Id"


@dataclass
class RequestContext:
    correlation_id: str
    received_at: str


def resolve_correlation_id(headers) -> str:
    for name in CORRELATION_HEADERS:
        value = headers.get(name)
        if value:
            return value
    return f"corr-{uuid.uuid4()}"


def bind_context(request: Request) -> RequestContext:
    ctx = RequestContext(
        correlation_id=resolve_correlation_id(request.headers),
        received_at=to_iso(utcnow()),
    )
    request.state.ctx = ctx
    return ctx


def get_context(request: Request) -> RequestContext:
    ctx = getattr(request.state, "ctx", None)
    if ctx is None:
        ctx = bind_context(request)
    return ctx
