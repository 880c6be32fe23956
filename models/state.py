"""
In-memory state container and its request dependency.

The whole demo runs against a single ``MemoryStore``: patients, store and DC
inventories, orders, shipments and the append-only event logs.  The store is
attached to the FastAPI application at startup and handed to each endpoint
through ``get_store`` so tests can build an app around their own instance.

FastAPI runs plain ``def`` endpoints on a thread pool, so every
read-modify-write sequence must hold ``store.lock``.
"""

from __future__ import annotations

import copy
import threading
from typing import Any, Dict, List, Optional

from fastapi import Request

from models.schemas import Location, Order, Patient, Shipment
from models.seed import SEED
from services.clock import Clock, IdTokenGenerator, utcnow


class MemoryStore:
    """Process-wide mutable state, rebuilt from a seed snapshot on reset."""

    def __init__(self, seed: Optional[Dict[str, Any]] = None, clock: Optional[Clock] = None):
        self._seed = copy.deepcopy(seed if seed is not None else SEED)
        self.clock: Clock = clock or utcnow
        self.lock = threading.RLock()
        self.ids = IdTokenGenerator()

        self.patients: Dict[str, Patient] = {}
        self.stores: Dict[str, Location] = {}
        self.dcs: Dict[str, Location] = {}
        self.orders: Dict[str, Order] = {}
        self.shipments: Dict[str, Shipment] = {}
        self.compliance_events: List[Dict[str, Any]] = []
        self.tax_reports: List[Dict[str, Any]] = []
        self.processor_events: List[Dict[str, Any]] = []
        self._load(copy.deepcopy(self._seed))

    def _load(self, data: Dict[str, Any]) -> None:
        self.patients = {k: Patient.model_validate(v) for k, v in data.get("patients", {}).items()}
        self.stores = {k: Location.model_validate(v) for k, v in data.get("stores", {}).items()}
        self.dcs = {k: Location.model_validate(v) for k, v in data.get("dcs", {}).items()}
        self.orders = {k: Order.model_validate(v) for k, v in data.get("orders", {}).items()}
        self.shipments = {k: Shipment.model_validate(v) for k, v in data.get("shipments", {}).items()}
        self.compliance_events = list(data.get("complianceEvents", []))
        self.tax_reports = list(data.get("taxReports", []))
        self.processor_events = list(data.get("processorEvents", []))

    def reset(self) -> Dict[str, int]:
        """Replace every collection with a fresh copy of the seed."""
        with self.lock:
            self._load(copy.deepcopy(self._seed))
            return self.summary()

    def summary(self) -> Dict[str, int]:
        with self.lock:
            return {
                "patients": len(self.patients),
                "stores": len(self.stores),
                "dcs": len(self.dcs),
                "orders": len(self.orders),
                "shipments": len(self.shipments),
                "complianceEvents": len(self.compliance_events),
                "taxReports": len(self.tax_reports),
                "processorEvents": len(self.processor_events),
            }


def get_store(request: Request) -> MemoryStore:
    """FastAPI dependency returning the application's store."""
    return request.app.state.store
