"""
FastAPI application exposing the pharmacy network demo backend.

This module wires the lifecycle engine, the reference-data directory and the
event logs into the HTTP surface the façade agent calls: check a patient
profile, check store inventory, place an order, dispatch a shipment and poll
their status.  All state lives in a single in-memory store.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from enterprise.context import RESPONSE_HEADER, RequestContext, bind_context, get_context
from models.schemas import Order, OrderCreate, Shipment, ShipmentDispatch
from models.state import MemoryStore, get_store
from services import admin, directory, event_log
from services import lifecycle as lifecycle_service
from services.errors import DomainError

HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", "8080"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
CORS_ALLOW_ORIGINS: List[str] = [
    o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
]

COMPONENT = "Pharma-Backend-BR"

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Messages for request fields that are present but malformed.
INVALID_FIELD_MESSAGES = {
    "quantity": "quantity must be an integer > 0",
}


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    return ".".join(parts)


def validation_error_body(errors: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Collapse pydantic errors into the 400 body callers expect.

    Absent, null or empty fields are reported together as missing; otherwise
    the first malformed field is reported.
    """
    missing: List[str] = []
    invalid: List[Dict[str, Any]] = []
    for err in errors:
        field = _field_name(err.get("loc", ()))
        if err.get("type") == "json_invalid":
            return {"message": "Request body must be valid JSON"}
        if not field:
            return {"message": "Request body is required", "details": {"missing": ["body"]}}
        if err.get("type") == "missing" or err.get("input") in (None, ""):
            if field not in missing:
                missing.append(field)
        else:
            invalid.append({"field": field, "message": err.get("msg")})

    if missing:
        return {"message": f"Body must contain {', '.join(missing)}", "details": {"missing": missing}}
    first = invalid[0]
    message = INVALID_FIELD_MESSAGES.get(first["field"], f"{first['field']}: {first['message']}")
    return {"message": message, "details": {"invalid": invalid}}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        body = validation_error_body(list(exc.errors()))
        logger.info("%s %s invalid payload: %s", request.method, request.url.path, body["message"])
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            content = {"message": "Resource not found", "path": request.url.path}
        else:
            content = {"message": exc.detail if isinstance(exc.detail, str) else "Request failed"}
        return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        ctx = get_context(request)
        logger.error(
            "Unhandled error on %s %s [%s]",
            request.method, request.url.path, ctx.correlation_id, exc_info=exc,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "message": "An error occurred while processing the request",
                "correlationId": ctx.correlation_id,
            },
            headers={RESPONSE_HEADER: ctx.correlation_id},
        )


def create_app(store: Optional[MemoryStore] = None) -> FastAPI:
    app = FastAPI(title="Pharma Network Demo Backend", version="0.1.0")
    app.state.store = store or MemoryStore()

    # Allow cross-origin requests from the demo front-ends
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[RESPONSE_HEADER],
    )

    @app.middleware("http")
    async def correlation_middleware(request: Request, call_next):
        ctx = bind_context(request)
        started = time.perf_counter()
        response = await call_next(request)
        response.headers[RESPONSE_HEADER] = ctx.correlation_id
        logger.info(
            "%s %s %d %.1fms [%s]",
            request.method, request.url.path, response.status_code,
            (time.perf_counter() - started) * 1000, ctx.correlation_id,
        )
        return response

    register_exception_handlers(app)

    @app.get("/health")
    def api_health(ctx: RequestContext = Depends(get_context)):
        return {"status": "UP", "component": COMPONENT, "correlationId": ctx.correlation_id}

    @app.post("/orders/prescriptions", response_model=Order, status_code=status.HTTP_201_CREATED)
    def api_create_order(order_in: OrderCreate, store: MemoryStore = Depends(get_store)):
        """Create a prescription order in PENDING_FULFILLMENT."""
        return lifecycle_service.create_order(store, order_in)

    @app.get("/orders", response_model=List[Order])
    def api_list_orders(store: MemoryStore = Depends(get_store)):
        """Latest 50 orders, newest first."""
        return lifecycle_service.list_orders(store)

    @app.get("/orders/{order_id}", response_model=Order)
    def api_get_order(order_id: str, store: MemoryStore = Depends(get_store)):
        """Read an order; completes it if its fulfilment window has passed."""
        return lifecycle_service.get_order(store, order_id)

    @app.post("/shipments/dispatch", response_model=Shipment, status_code=status.HTTP_201_CREATED)
    def api_dispatch_shipment(dispatch_in: ShipmentDispatch, store: MemoryStore = Depends(get_store)):
        """Dispatch an order's quantity from a DC."""
        return lifecycle_service.dispatch_shipment(store, dispatch_in)

    @app.get("/shipments", response_model=List[Shipment])
    def api_list_shipments(store: MemoryStore = Depends(get_store)):
        return lifecycle_service.list_shipments(store)

    @app.get("/shipments/{shipment_id}", response_model=Shipment)
    def api_get_shipment(shipment_id: str, store: MemoryStore = Depends(get_store)):
        """Read a shipment; marks it delivered if its transit window has passed."""
        return lifecycle_service.get_shipment(store, shipment_id)

    app.include_router(directory.router)
    app.include_router(event_log.router)
    app.include_router(admin.router)
    return app


app = create_app()


if __name__ == "__main__":
    logger.info("Pharma backend (BR) listening on port %s", PORT)
    uvicorn.run(app, host=HOST, port=PORT)
