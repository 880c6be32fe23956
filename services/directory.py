"""
Patient and store-inventory lookups.

Read-only views over the reference data held in the store.  The patient
profile endpoint deliberately answers 200 with ``exists: false`` for unknown
patients; the façade relies on that shape.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from models.state import MemoryStore, get_store
from services.errors import NotFoundError

router = APIRouter(tags=["directory"])


def patient_profile(store: MemoryStore, patient_id: str) -> Dict[str, Any]:
    patient = store.patients.get(patient_id)
    if patient is None:
        return {
            "exists": False,
            "patientId": patient_id,
            "message": "Patient not found in the demo database",
        }

    prescriptions = []
    for p in patient.prescriptions:
        item = p.to_wire()
        item["refillEligible"] = p.refill_eligible
        prescriptions.append(item)

    return {
        "exists": True,
        "patientId": patient.patient_id,
        "cpf": patient.cpf,
        "name": patient.name,
        "chronicConditions": list(patient.chronic_conditions),
        "preferredStoreId": patient.preferred_store_id,
        "activePrescriptions": prescriptions,
    }


def store_inventory(store: MemoryStore, store_id: str, sku: Optional[str] = None) -> Dict[str, Any]:
    with store.lock:
        location = store.stores.get(store_id)
        if location is None:
            raise NotFoundError("Store not found")

        if not sku:
            return {
                "storeId": store_id,
                "items": {k: v.to_wire() for k, v in location.items.items()},
            }

        record = location.items.get(sku)
        if record is None:
            raise NotFoundError("SKU not found in the store inventory")
        return {"storeId": store_id, **record.to_wire()}


@router.get("/patients/profile/{patient_id}")
def api_patient_profile(patient_id: str, store: MemoryStore = Depends(get_store)):
    """Patient profile with refill eligibility per prescription."""
    return patient_profile(store, patient_id)


@router.get("/stores/{store_id}/inventory")
def api_store_inventory(
    store_id: str,
    sku: Optional[str] = Query(None, description="Restrict the answer to one SKU"),
    store: MemoryStore = Depends(get_store),
):
    """Full store stock, or a single SKU's stock record."""
    return store_inventory(store, store_id, sku)
