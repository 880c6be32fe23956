"""
Pydantic models and enums used throughout the pharmacy backend API.

These models define the shape of request and response bodies and of the
records held in memory.  Attributes are snake_case in Python and camelCase on
the wire, which is the shape the façade callers already consume.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model: camelCase aliases, population by either name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class OrderStatus(str, Enum):
    """Lifecycle state of a prescription order."""
    PENDING_FULFILLMENT = "PENDING_FULFILLMENT"  # Created, awaiting store fulfilment
    COMPLETED = "COMPLETED"                      # Fulfilled; store stock debited
    IN_PROGRESS = "IN_PROGRESS"                  # Only present in seed data


class ShipmentStatus(str, Enum):
    """Lifecycle state of a DC → store shipment."""
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"


class StockRecord(ApiModel):
    sku: str
    name: Optional[str] = None
    quantity_on_hand: int = Field(..., ge=0)
    reorder_point: Optional[int] = None
    cold_chain: bool = False


class Location(ApiModel):
    """A retail store or a distribution center with its stock records."""
    store_id: Optional[str] = None
    dc_id: Optional[str] = None
    name: Optional[str] = None
    region: Optional[str] = None
    items: Dict[str, StockRecord] = Field(default_factory=dict)


class Prescription(ApiModel):
    prescription_id: str
    sku: str
    name: Optional[str] = None
    dosage: Optional[str] = None
    days_of_supply: Optional[int] = None
    refillable: bool = False
    refills_remaining: int = 0
    last_dispensed_at: Optional[str] = None

    @property
    def refill_eligible(self) -> bool:
        return bool(self.refillable and self.refills_remaining > 0)


class Patient(ApiModel):
    patient_id: str
    cpf: Optional[str] = None
    name: str
    chronic_conditions: List[str] = Field(default_factory=list)
    preferred_store_id: Optional[str] = None
    prescriptions: List[Prescription] = Field(default_factory=list)


class OrderCreate(ApiModel):
    """Request model for creating a prescription order."""
    patient_id: str = Field(..., min_length=1, description="Patient identifier")
    store_id: str = Field(..., min_length=1, description="Fulfilling store identifier")
    sku: str = Field(..., min_length=1, description="Product SKU")
    quantity: StrictInt = Field(..., gt=0, description="Units requested")
    channel: str = Field(..., min_length=1, description="Sales channel, e.g. APP_MOBILE")


class Order(ApiModel):
    order_id: str
    patient_id: str
    store_id: str
    sku: str
    quantity: int
    channel: str
    status: OrderStatus = OrderStatus.PENDING_FULFILLMENT
    sla_hours: int = 24
    cold_chain: bool = False
    created_at: str
    last_updated_at: str


class ShipmentDispatch(ApiModel):
    """Request model for dispatching a shipment from a DC."""
    order_id: str = Field(..., min_length=1)
    dc_id: str = Field(..., min_length=1)


class Shipment(ApiModel):
    shipment_id: str
    order_id: str
    dc_id: str
    store_id: str
    status: ShipmentStatus = ShipmentStatus.IN_TRANSIT
    cold_chain: bool = False
    eta_hours: int = 12
    created_at: str
    last_updated_at: str
