"""Unit tests for the order/shipment lifecycle engine."""

import pytest

from conftest import dc_qty, store_qty
from models.schemas import OrderCreate, OrderStatus, ShipmentDispatch, ShipmentStatus
from services import lifecycle
from services.errors import NotFoundError, ValidationError


def make_order(store, **overrides):
    data = {
        "patient_id": "PAT-BR-001",
        "store_id": "LOJA-SP-001",
        "sku": "MED-INSULINA",
        "quantity": 1,
        "channel": "APP_MOBILE",
    }
    data.update(overrides)
    return lifecycle.create_order(store, OrderCreate(**data))


def test_create_order_is_pending_and_leaves_stock_alone(store):
    order = make_order(store)

    assert order.status == OrderStatus.PENDING_FULFILLMENT
    assert order.cold_chain is True
    assert order.sla_hours == 24
    assert order.created_at == order.last_updated_at == "2026-01-06T09:07:57.118Z"
    assert order.order_id == "ORD-LOJA-SP-001-MED-INSULINA-20260106T090757118Z"
    assert order.order_id in store.orders
    assert store_qty(store, "LOJA-SP-001", "MED-INSULINA") == 3


def test_order_completes_only_after_threshold(store, clock):
    order = make_order(store)

    clock.advance(minutes=5)
    assert lifecycle.get_order(store, order.order_id).status == OrderStatus.PENDING_FULFILLMENT
    assert store_qty(store, "LOJA-SP-001", "MED-INSULINA") == 3

    clock.advance(minutes=2)
    polled = lifecycle.get_order(store, order.order_id)
    assert polled.status == OrderStatus.COMPLETED
    assert polled.last_updated_at == "2026-01-06T09:14:57.118Z"
    assert store_qty(store, "LOJA-SP-001", "MED-INSULINA") == 2


def test_threshold_is_strict(store, clock):
    order = make_order(store)
    clock.advance(minutes=6)
    assert lifecycle.get_order(store, order.order_id).status == OrderStatus.PENDING_FULFILLMENT
    clock.advance(milliseconds=1)
    assert lifecycle.get_order(store, order.order_id).status == OrderStatus.COMPLETED


def test_completed_order_is_not_debited_twice(store, clock):
    order = make_order(store)
    clock.advance(minutes=10)
    first = lifecycle.get_order(store, order.order_id)

    for _ in range(3):
        clock.advance(hours=1)
        again = lifecycle.get_order(store, order.order_id)
        assert again.status == OrderStatus.COMPLETED
        assert again.last_updated_at == first.last_updated_at

    assert store_qty(store, "LOJA-SP-001", "MED-INSULINA") == 2


def test_stock_debit_is_clamped_at_zero(store, clock):
    order = make_order(store, quantity=10)
    clock.advance(minutes=7)
    lifecycle.get_order(store, order.order_id)
    assert store_qty(store, "LOJA-SP-001", "MED-INSULINA") == 0


def test_order_for_unstocked_sku_completes_without_stock_change(store, clock):
    order = make_order(store, store_id="LOJA-MG-001")
    before = {k: v.quantity_on_hand for k, v in store.stores["LOJA-MG-001"].items.items()}

    clock.advance(minutes=7)
    assert lifecycle.get_order(store, order.order_id).status == OrderStatus.COMPLETED
    after = {k: v.quantity_on_hand for k, v in store.stores["LOJA-MG-001"].items.items()}
    assert after == before


def test_seeded_in_progress_order_is_left_alone(store, clock):
    order_id = "ORD-LOJA-MG-001-MED-ANTI-HIPERTENSAO-2025-01-11T09:00:00.000Z"
    polled = lifecycle.get_order(store, order_id)
    assert polled.status == OrderStatus.IN_PROGRESS
    assert store_qty(store, "LOJA-MG-001", "MED-ANTI-HIPERTENSAO") == 8


@pytest.mark.parametrize(
    "store_id, sku, expected",
    [
        ("LOJA-SP-001", "MED-INSULINA", True),
        ("LOJA-SP-001", "MED-ANTIBIOTICO", False),
        ("LOJA-MG-001", "MED-INSULINA", True),   # no store record, SKU rule applies
        ("LOJA-MG-001", "MED-VITAMINA-C", False),
    ],
)
def test_cold_chain_resolution(store, store_id, sku, expected):
    assert lifecycle.resolve_cold_chain(store, store_id, sku) is expected


def test_store_record_wins_over_sku_rule(store):
    store.stores["LOJA-SP-001"].items["MED-INSULINA"].cold_chain = False
    assert make_order(store).cold_chain is False


def test_unknown_patient_is_rejected_without_side_effects(store):
    before = len(store.orders)
    with pytest.raises(NotFoundError, match="Patient not found"):
        make_order(store, patient_id="PAT-XX-999")
    assert len(store.orders) == before


def test_unknown_store_is_rejected(store):
    with pytest.raises(NotFoundError, match="Store not found"):
        make_order(store, store_id="LOJA-XX-999")


def test_internal_replenishment_skips_patient_check(store):
    order = make_order(store, patient_id=lifecycle.INTERNAL_REPLENISHMENT_PATIENT_ID, quantity=20)
    assert order.status == OrderStatus.PENDING_FULFILLMENT


def test_same_millisecond_orders_get_distinct_ids(store):
    first = make_order(store)
    second = make_order(store)

    assert first.order_id != second.order_id
    assert second.order_id == "ORD-LOJA-SP-001-MED-INSULINA-20260106T090757119Z"


def test_get_unknown_order(store):
    with pytest.raises(NotFoundError):
        lifecycle.get_order(store, "ORD-NOPE")


def test_list_orders_newest_first(store, clock):
    older = make_order(store)
    clock.advance(seconds=30)
    newer = make_order(store, sku="MED-ANALGESICO")

    ids = [o.order_id for o in lifecycle.list_orders(store)]
    assert ids[:2] == [newer.order_id, older.order_id]
    assert len(ids) == 4


def test_list_orders_is_capped(store, clock):
    for _ in range(55):
        clock.advance(seconds=1)
        make_order(store, sku="MED-ANALGESICO")
    assert len(lifecycle.list_orders(store)) == 50


def test_listing_does_not_transition(store, clock):
    order = make_order(store)
    clock.advance(hours=1)
    listed = {o.order_id: o for o in lifecycle.list_orders(store)}
    assert listed[order.order_id].status == OrderStatus.PENDING_FULFILLMENT
    assert store_qty(store, "LOJA-SP-001", "MED-INSULINA") == 3


def test_returned_order_is_a_copy(store):
    order = make_order(store)
    polled = lifecycle.get_order(store, order.order_id)
    polled.status = OrderStatus.COMPLETED
    assert store.orders[order.order_id].status == OrderStatus.PENDING_FULFILLMENT


# ---------------------------------------------------------------------------
# Shipments
# ---------------------------------------------------------------------------

def dispatch(store, order_id, dc_id="CD-SP-01"):
    return lifecycle.dispatch_shipment(store, ShipmentDispatch(order_id=order_id, dc_id=dc_id))


def test_dispatch_debits_dc_immediately(store):
    order = make_order(store, quantity=5)
    shipment = dispatch(store, order.order_id)

    assert shipment.status == ShipmentStatus.IN_TRANSIT
    assert shipment.cold_chain is True
    assert shipment.store_id == "LOJA-SP-001"
    assert shipment.eta_hours == 12
    assert shipment.shipment_id == f"SHP-{order.order_id}-20260106T090757119Z"
    assert dc_qty(store, "CD-SP-01", "MED-INSULINA") == 195
    # store stock is unaffected by dispatch
    assert store_qty(store, "LOJA-SP-001", "MED-INSULINA") == 3


def test_dispatch_with_insufficient_stock_changes_nothing(store):
    store.dcs["CD-SP-01"].items["MED-INSULINA"].quantity_on_hand = 0
    order = make_order(store)
    before = len(store.shipments)

    with pytest.raises(ValidationError) as exc_info:
        dispatch(store, order.order_id)

    assert exc_info.value.details["available"] == 0
    assert len(store.shipments) == before
    assert dc_qty(store, "CD-SP-01", "MED-INSULINA") == 0


def test_dispatch_exact_stock_succeeds(store):
    order = make_order(store, quantity=80)
    dispatch(store, order.order_id, dc_id="CD-RJ-01")
    assert dc_qty(store, "CD-RJ-01", "MED-INSULINA") == 0


def test_dispatch_one_over_stock_fails(store):
    order = make_order(store, quantity=81)
    with pytest.raises(ValidationError):
        dispatch(store, order.order_id, dc_id="CD-RJ-01")
    assert dc_qty(store, "CD-RJ-01", "MED-INSULINA") == 80


@pytest.mark.parametrize(
    "order_id, dc_id, message",
    [
        ("ORD-NOPE", "CD-SP-01", "Order not found"),
        (None, "CD-XX-99", "DC not found"),
    ],
)
def test_dispatch_unknown_references(store, order_id, dc_id, message):
    order_id = order_id or make_order(store).order_id
    with pytest.raises(NotFoundError, match=message):
        dispatch(store, order_id, dc_id=dc_id)


def test_dispatch_sku_missing_from_dc(store):
    order = make_order(store, sku="MED-ANALGESICO")
    with pytest.raises(NotFoundError, match="SKU not found"):
        dispatch(store, order.order_id, dc_id="CD-RJ-01")


def test_shipment_delivery_follows_threshold_without_stock_effect(store, clock):
    order = make_order(store, quantity=5)
    shipment = dispatch(store, order.order_id)

    clock.advance(minutes=3)
    assert lifecycle.get_shipment(store, shipment.shipment_id).status == ShipmentStatus.IN_TRANSIT

    clock.advance(minutes=4)
    delivered = lifecycle.get_shipment(store, shipment.shipment_id)
    assert delivered.status == ShipmentStatus.DELIVERED
    assert delivered.last_updated_at == "2026-01-06T09:14:57.118Z"
    assert dc_qty(store, "CD-SP-01", "MED-INSULINA") == 195

    clock.advance(hours=2)
    again = lifecycle.get_shipment(store, shipment.shipment_id)
    assert again.last_updated_at == delivered.last_updated_at


def test_order_may_have_several_shipments(store):
    order = make_order(store, quantity=2)
    first = dispatch(store, order.order_id)
    second = dispatch(store, order.order_id)
    assert first.shipment_id != second.shipment_id
    assert dc_qty(store, "CD-SP-01", "MED-INSULINA") == 196


def test_get_unknown_shipment(store):
    with pytest.raises(NotFoundError, match="Shipment not found"):
        lifecycle.get_shipment(store, "SHP-NOPE")


def test_list_shipments_newest_first(store, clock):
    order = make_order(store)
    clock.advance(seconds=5)
    shipment = dispatch(store, order.order_id)
    listed = lifecycle.list_shipments(store)
    assert listed[0].shipment_id == shipment.shipment_id
    assert len(listed) == 2
