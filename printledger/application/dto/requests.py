"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

Range checks on quantities and costs live in the use cases so that they
surface as InvalidArgumentError for every caller, not only HTTP ones.
"""

from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from printledger.core.entities.movement import MovementType
from printledger.core.entities.production import JobStatus

# --- Materials ---


class CreateMaterialRequest(BaseModel):
    """Request to register a raw material."""

    name: str = Field(..., min_length=1, description="Material name")
    type: str = Field(..., min_length=1, description="Category", examples=["PLA", "RESIN"])
    unit: str = Field(..., min_length=1, description="Unit of measure", examples=["kg", "L"])
    stock: Decimal = Field(default=Decimal("0"), description="Initial stock on hand")
    min_stock: Decimal = Field(default=Decimal("0"), description="Reorder threshold")
    max_stock: Decimal | None = Field(default=None, description="Overstock threshold")
    cost_per_unit: Decimal = Field(default=Decimal("0"), description="Average unit cost")
    supplier: str | None = None
    location: str | None = None


class AdjustMaterialRequest(BaseModel):
    """Signed manual stock correction."""

    quantity: Decimal = Field(..., description="Signed adjustment (negative removes stock)")
    reason: str | None = Field(default=None, description="Why the stock was corrected")
    batch_id: int | None = Field(default=None, description="Batch to correct alongside")
    created_by: str | None = None


# --- Batches ---


class CreateBatchRequest(BaseModel):
    """Request to receive a purchase lot."""

    material_id: int = Field(..., description="Owning material ID")
    purchase_date: date | None = Field(default=None, description="Defaults to today")
    original_qty: Decimal = Field(..., description="Quantity purchased")
    unit_cost: Decimal = Field(..., description="Cost basis per unit")
    expiry_date: date | None = None
    supplier: str | None = None
    invoice_number: str | None = Field(default=None, description="Supplier invoice reference")
    created_by: str | None = None


# --- Movements ---


class RecordMovementRequest(BaseModel):
    """Request to append a movement to the ledger."""

    type: MovementType
    material_id: int
    quantity: Decimal = Field(
        ..., description="Positive amount; signed for ADJUSTMENT"
    )
    batch_id: int | None = None
    production_job_id: int | None = None
    reference: str | None = None
    notes: str | None = None
    created_by: str | None = None


# --- Production ---


class AddProductionCostRequest(BaseModel):
    """Record material consumed by a production job."""

    production_job_id: int
    material_id: int
    quantity: Decimal
    batch_id: int | None = Field(default=None, description="Pin a batch; FIFO otherwise")
    notes: str | None = None
    created_by: str | None = None


class CreateProductionJobRequest(BaseModel):
    """Request to queue a production job."""

    name: str = Field(..., description="Job name")
    description: str | None = None
    priority: int = Field(default=5, description="1 (lowest) to 10 (highest)")
    estimated_hours: Decimal | None = None
    printer: str | None = None
    material: str | None = Field(default=None, description="Material label for operators")
    settings: dict[str, Any] = Field(default_factory=dict, description="Print parameters")
    files: list[str] = Field(default_factory=list)
    notes: str | None = None
    order_id: str | None = None
    product_id: int | None = None


class UpdateProductionJobRequest(BaseModel):
    """Partial update of a job; only fields present in the body are applied."""

    status: JobStatus | None = None
    name: str | None = None
    description: str | None = None
    priority: int | None = None
    estimated_hours: Decimal | None = None
    actual_hours: Decimal | None = None
    printer: str | None = None
    material: str | None = None
    settings: dict[str, Any] | None = None
    notes: str | None = None
