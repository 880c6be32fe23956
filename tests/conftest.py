"""
Pytest configuration and fixtures for the pharmacy demo backend tests.

Every test gets its own seeded store driven by a controllable clock, and an
application built around that store.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from main import create_app
from models.state import MemoryStore

START = datetime(2026, 1, 6, 9, 7, 57, 118000, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return MemoryStore(clock=clock)


@pytest.fixture
def app(store):
    return create_app(store)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def insulin_order():
    """Order payload for Ana's insulin at the São Paulo store."""
    return {
        "patientId": "PAT-BR-001",
        "storeId": "LOJA-SP-001",
        "sku": "MED-INSULINA",
        "quantity": 1,
        "channel": "APP_MOBILE",
    }


def store_qty(store: MemoryStore, store_id: str, sku: str) -> int:
    return store.stores[store_id].items[sku].quantity_on_hand


def dc_qty(store: MemoryStore, dc_id: str, sku: str) -> int:
    return store.dcs[dc_id].items[sku].quantity_on_hand
