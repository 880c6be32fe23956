"""
Append-only event logs pushed by the integration layer.

Compliance audits, tax reports and message-processor events are stored as
received, enriched with a server-side identifier or timestamp.  Tech alerts
are only logged.  None of these touch orders, shipments or stock.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, status

from models.state import MemoryStore, get_store
from services.clock import to_iso

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])

RECENT_LIMIT = 50


def record_compliance_event(store: MemoryStore, event: Dict[str, Any]) -> Dict[str, Any]:
    now = to_iso(store.clock())
    stored = {**event, "complianceId": f"CMP-{now}", "createdAt": now}
    with store.lock:
        store.compliance_events.append(stored)
    return stored


def record_tax_report(store: MemoryStore, report: Dict[str, Any]) -> Dict[str, Any]:
    now = to_iso(store.clock())
    stored = {**report, "reportId": f"TAX-{now}", "receivedAt": now}
    with store.lock:
        store.tax_reports.append(stored)
    return stored


def record_processor_event(store: MemoryStore, event: Dict[str, Any]) -> int:
    """Store a processor event and return how many have been received."""
    enriched = {**event, "receivedAt": to_iso(store.clock())}
    with store.lock:
        store.processor_events.append(enriched)
        count = len(store.processor_events)
    logger.info("Processor event received: %s", json.dumps(enriched, ensure_ascii=False, default=str))
    return count


def recent(entries: List[Dict[str, Any]], newest_first: bool = False, limit: int = RECENT_LIMIT) -> List[Dict[str, Any]]:
    if newest_first:
        return list(reversed(entries))[:limit]
    return list(entries[-limit:])


@router.post("/compliance/audit", status_code=status.HTTP_201_CREATED)
def api_post_compliance_audit(
    event: Optional[Dict[str, Any]] = Body(None),
    store: MemoryStore = Depends(get_store),
):
    return record_compliance_event(store, event or {})


@router.get("/compliance/audit")
def api_list_compliance_audit(store: MemoryStore = Depends(get_store)):
    with store.lock:
        return recent(store.compliance_events)


@router.post("/finance/tax-report", status_code=status.HTTP_201_CREATED)
def api_post_tax_report(
    report: Optional[Dict[str, Any]] = Body(None),
    store: MemoryStore = Depends(get_store),
):
    return record_tax_report(store, report or {})


@router.get("/finance/tax-report")
def api_list_tax_reports(store: MemoryStore = Depends(get_store)):
    with store.lock:
        return recent(store.tax_reports)


@router.post("/ops/processor-events", status_code=status.HTTP_202_ACCEPTED)
def api_post_processor_event(
    event: Optional[Dict[str, Any]] = Body(None),
    store: MemoryStore = Depends(get_store),
):
    count = record_processor_event(store, event or {})
    return {"status": "RECEIVED", "count": count}


@router.get("/ops/processor-events")
def api_list_processor_events(store: MemoryStore = Depends(get_store)):
    """Most recent processor events, newest first."""
    with store.lock:
        return recent(store.processor_events, newest_first=True)


@router.post("/tech/alerts", status_code=status.HTTP_202_ACCEPTED)
def api_post_tech_alert(
    alert: Optional[Dict[str, Any]] = Body(None),
    store: MemoryStore = Depends(get_store),
):
    logger.warning("[TECH ALERT] %s", json.dumps(alert or {}, ensure_ascii=False, default=str))
    return {"status": "RECEIVED", "at": to_iso(store.clock())}
