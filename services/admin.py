"""
Demo utilities: reset the in-memory state to its seed and inspect counts.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from enterprise.audit import log_action
from enterprise.context import RequestContext, get_context
from models.state import MemoryStore, get_store

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/reset")
def api_reset(store: MemoryStore = Depends(get_store), ctx: RequestContext = Depends(get_context)):
    """Discard every order, shipment, event and stock change since startup."""
    summary = store.reset()
    log_action(ctx.correlation_id, "admin.reset", summary)
    return {"status": "RESET", "snapshot": summary}


@router.get("/snapshot")
def api_snapshot(store: MemoryStore = Depends(get_store), ctx: RequestContext = Depends(get_context)):
    summary = store.summary()
    log_action(ctx.correlation_id, "admin.snapshot", summary)
    return {"snapshot": summary}
