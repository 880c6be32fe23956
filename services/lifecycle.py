"""
Order and shipment lifecycle engine.

Orders move from ``PENDING_FULFILLMENT`` to ``COMPLETED`` and shipments from
``IN_TRANSIT`` to ``DELIVERED``.  There is no scheduler: a transition is
evaluated whenever the record is read, by comparing the time elapsed since
creation against ``TRANSITION_THRESHOLD_HOURS``.

Stock moves in two places only.  Completing an order debits the store's stock
record (clamped at zero).  Dispatching a shipment debits the DC's stock record
immediately, after checking that it covers the order quantity.  Every check
runs before any mutation, so a rejected request leaves the store untouched.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import List

from models.schemas import (
    Order,
    OrderCreate,
    OrderStatus,
    Shipment,
    ShipmentDispatch,
    ShipmentStatus,
)
from models.state import MemoryStore
from services.clock import hours_between, parse_iso, to_iso
from services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

TRANSITION_THRESHOLD_HOURS: float = float(os.getenv("PHARMA_TRANSITION_HOURS", "0.1"))
ORDER_SLA_HOURS = 24
SHIPMENT_ETA_HOURS = 12
LIST_LIMIT = 50

# Replenishment orders raised by the network itself carry no patient.
INTERNAL_REPLENISHMENT_PATIENT_ID = "PAT-INTERNAL-REPLENISHMENT"

# Used only when the store holds no record for the SKU.
# TODO: drop once every catalogue SKU carries its own coldChain flag.
COLD_CHAIN_SKUS = frozenset({"MED-INSULINA"})


def resolve_cold_chain(store: MemoryStore, store_id: str, sku: str) -> bool:
    location = store.stores.get(store_id)
    record = location.items.get(sku) if location else None
    if record is not None:
        return record.cold_chain
    return sku in COLD_CHAIN_SKUS


def _is_due(created_at: str, now: datetime) -> bool:
    return hours_between(created_at, now) > TRANSITION_THRESHOLD_HOURS


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

def create_order(store: MemoryStore, order_in: OrderCreate) -> Order:
    """Register a prescription order in ``PENDING_FULFILLMENT``.

    Raises NotFoundError when the patient or the store is unknown.  Stock is
    not touched until the order completes.
    """
    with store.lock:
        if (
            order_in.patient_id != INTERNAL_REPLENISHMENT_PATIENT_ID
            and order_in.patient_id not in store.patients
        ):
            raise NotFoundError("Patient not found")
        if order_in.store_id not in store.stores:
            raise NotFoundError("Store not found")

        now = store.clock()
        created_at = to_iso(now)
        order_id = f"ORD-{order_in.store_id}-{order_in.sku}-{store.ids.next(now)}"
        order = Order(
            order_id=order_id,
            patient_id=order_in.patient_id,
            store_id=order_in.store_id,
            sku=order_in.sku,
            quantity=order_in.quantity,
            channel=order_in.channel,
            status=OrderStatus.PENDING_FULFILLMENT,
            sla_hours=ORDER_SLA_HOURS,
            cold_chain=resolve_cold_chain(store, order_in.store_id, order_in.sku),
            created_at=created_at,
            last_updated_at=created_at,
        )
        store.orders[order_id] = order
    logger.info("Order %s created for patient %s (%s x%d)", order_id, order.patient_id, order.sku, order.quantity)
    return order


def advance_order(store: MemoryStore, order: Order) -> bool:
    """Complete a pending order once its threshold has passed.

    Returns True if the order transitioned on this call.  The caller must hold
    ``store.lock``.
    """
    if order.status != OrderStatus.PENDING_FULFILLMENT:
        return False
    now = store.clock()
    if not _is_due(order.created_at, now):
        return False

    order.status = OrderStatus.COMPLETED
    order.last_updated_at = to_iso(now)

    location = store.stores.get(order.store_id)
    record = location.items.get(order.sku) if location else None
    if record is not None:
        record.quantity_on_hand = max(0, record.quantity_on_hand - order.quantity)
        logger.info(
            "Order %s completed; %s stock at %s now %d",
            order.order_id, order.sku, order.store_id, record.quantity_on_hand,
        )
    else:
        logger.info("Order %s completed; no stock record for %s at %s", order.order_id, order.sku, order.store_id)
    return True


def get_order(store: MemoryStore, order_id: str) -> Order:
    """Return an order, applying any transition that is now due."""
    with store.lock:
        order = store.orders.get(order_id)
        if order is None:
            raise NotFoundError("Order not found")
        advance_order(store, order)
        return order.model_copy(deep=True)


def list_orders(store: MemoryStore, limit: int = LIST_LIMIT) -> List[Order]:
    """Latest orders, newest first.  Listing never triggers transitions."""
    with store.lock:
        orders = sorted(store.orders.values(), key=lambda o: parse_iso(o.created_at), reverse=True)
        return [o.model_copy(deep=True) for o in orders[:limit]]


# ---------------------------------------------------------------------------
# Shipments
# ---------------------------------------------------------------------------

def dispatch_shipment(store: MemoryStore, dispatch_in: ShipmentDispatch) -> Shipment:
    """Ship an order's quantity from a DC, debiting DC stock right away.

    Raises NotFoundError for an unknown order, DC or DC SKU and
    ValidationError when the DC holds less than the order quantity.
    """
    with store.lock:
        order = store.orders.get(dispatch_in.order_id)
        if order is None:
            raise NotFoundError("Order not found")
        dc = store.dcs.get(dispatch_in.dc_id)
        if dc is None:
            raise NotFoundError("DC not found")
        record = dc.items.get(order.sku)
        if record is None:
            raise NotFoundError("SKU not found in the DC inventory")
        if record.quantity_on_hand < order.quantity:
            raise ValidationError(
                "Insufficient DC stock to fulfil the shipment",
                details={
                    "dcId": dc.dc_id or dispatch_in.dc_id,
                    "sku": order.sku,
                    "requested": order.quantity,
                    "available": record.quantity_on_hand,
                },
            )

        record.quantity_on_hand -= order.quantity

        now = store.clock()
        created_at = to_iso(now)
        shipment_id = f"SHP-{order.order_id}-{store.ids.next(now)}"
        shipment = Shipment(
            shipment_id=shipment_id,
            order_id=order.order_id,
            dc_id=dispatch_in.dc_id,
            store_id=order.store_id,
            status=ShipmentStatus.IN_TRANSIT,
            cold_chain=order.cold_chain,
            eta_hours=SHIPMENT_ETA_HOURS,
            created_at=created_at,
            last_updated_at=created_at,
        )
        store.shipments[shipment_id] = shipment
        remaining = record.quantity_on_hand
    logger.info(
        "Shipment %s dispatched from %s (%s x%d, %d left)",
        shipment_id, dispatch_in.dc_id, order.sku, order.quantity, remaining,
    )
    return shipment


def advance_shipment(store: MemoryStore, shipment: Shipment) -> bool:
    """Mark an in-transit shipment delivered once its threshold has passed.

    Delivery has no stock effect.  The caller must hold ``store.lock``.
    """
    if shipment.status != ShipmentStatus.IN_TRANSIT:
        return False
    now = store.clock()
    if not _is_due(shipment.created_at, now):
        return False
    shipment.status = ShipmentStatus.DELIVERED
    shipment.last_updated_at = to_iso(now)
    logger.info("Shipment %s delivered to %s", shipment.shipment_id, shipment.store_id)
    return True


def get_shipment(store: MemoryStore, shipment_id: str) -> Shipment:
    with store.lock:
        shipment = store.shipments.get(shipment_id)
        if shipment is None:
            raise NotFoundError("Shipment not found")
        advance_shipment(store, shipment)
        return shipment.model_copy(deep=True)


def list_shipments(store: MemoryStore, limit: int = LIST_LIMIT) -> List[Shipment]:
    with store.lock:
        shipments = sorted(store.shipments.values(), key=lambda s: parse_iso(s.created_at), reverse=True)
        return [s.model_copy(deep=True) for s in shipments[:limit]]
