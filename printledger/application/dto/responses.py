"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
Decimal fields serialize as JSON strings so no precision is lost.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field


class ComponentHealthResponse(BaseModel):
    """Health of a single dependency."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. MATERIAL_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


class PaginationResponse(BaseModel):
    """Page metadata for ledger listings."""

    page: int
    limit: int
    total: int
    pages: int


# --- Materials ---


class MaterialResponse(BaseModel):
    """Material with its derived stock health."""

    id: int
    name: str
    type: str
    unit: str
    stock: Decimal
    min_stock: Decimal
    max_stock: Decimal | None = None
    cost_per_unit: Decimal
    supplier: str | None = None
    location: str | None = None
    stock_status: str
    stock_value: Decimal
    days_of_stock: int | None = None
    created_at: datetime
    updated_at: datetime


class MaterialListResponse(BaseModel):
    materials: list[MaterialResponse]
    total: int


# --- Batches ---


class BatchResponse(BaseModel):
    """Purchase lot with derived status."""

    id: int
    batch_number: str
    material_id: int
    material_name: str | None = None
    material_unit: str | None = None
    purchase_date: date
    supplier: str | None = None
    invoice_number: str | None = None
    original_qty: Decimal
    current_qty: Decimal
    unit_cost: Decimal
    total_cost: Decimal
    expiry_date: date | None = None
    is_active: bool
    status: str
    usage_percentage: Decimal
    days_until_expiry: int | None = None
    created_at: datetime
    updated_at: datetime


class BatchListResponse(BaseModel):
    batches: list[BatchResponse]
    total: int


# --- Movements ---


class MovementResponse(BaseModel):
    """Ledger row."""

    id: int
    movement_number: str
    type: str
    impact: str
    material_id: int
    batch_id: int | None = None
    production_job_id: int | None = None
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal
    stock_after: Decimal
    reference: str | None = None
    notes: str | None = None
    movement_date: datetime
    created_by: str | None = None
    created_at: datetime


class MovementListResponse(BaseModel):
    movements: list[MovementResponse]
    pagination: PaginationResponse


class CreateBatchResponse(BaseModel):
    """A received batch and the PURCHASE movement it produced."""

    batch: BatchResponse
    movement: MovementResponse


class AdjustMaterialResponse(BaseModel):
    material: MaterialResponse
    movement: MovementResponse


class CreateMaterialResponse(BaseModel):
    material: MaterialResponse
    movement: MovementResponse | None = None


# --- Production ---


class ProductionJobResponse(BaseModel):
    id: int
    job_number: str
    name: str
    description: str | None = None
    status: str
    priority: int
    estimated_hours: Decimal | None = None
    actual_hours: Decimal | None = None
    printer: str | None = None
    material: str | None = None
    settings: dict[str, Any] = Field(default_factory=dict)
    files: list[str] = Field(default_factory=list)
    notes: str | None = None
    order_id: str | None = None
    product_id: int | None = None
    created_at: datetime
    started_at: datetime | None = None
    completed_at: datetime | None = None
    updated_at: datetime


class ProductionJobListResponse(BaseModel):
    jobs: list[ProductionJobResponse]
    total: int


class ProductionStatsResponse(BaseModel):
    total_jobs: int
    active_jobs: int
    queued_jobs: int
    failed_jobs: int
    completed_today: int
    avg_completion_hours: Decimal


class ProductionCostResponse(BaseModel):
    id: int
    production_job_id: int
    material_id: int
    material_name: str | None = None
    material_unit: str | None = None
    batch_id: int | None = None
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal
    notes: str | None = None
    created_at: datetime


class AddProductionCostResponse(BaseModel):
    """A recorded cost row and its CONSUMPTION movement."""

    cost: ProductionCostResponse
    movement: MovementResponse


class ProductionCostListResponse(BaseModel):
    costs: list[ProductionCostResponse]
    pagination: PaginationResponse


class CostLineResponse(BaseModel):
    material_id: int
    material: str
    unit: str | None = None
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal


class MaterialCostBlock(BaseModel):
    cost: Decimal
    items: list[CostLineResponse]


class LaborCostBlock(BaseModel):
    hours: Decimal
    cost_per_hour: Decimal
    total_cost: Decimal


class CostBreakdownBlock(BaseModel):
    materials: MaterialCostBlock
    labor: LaborCostBlock


class CostTotalsBlock(BaseModel):
    material_cost: Decimal
    labor_cost: Decimal
    total_cost: Decimal
    suggested_price: Decimal
    margin: Decimal = Field(..., description="Margin in percent")


class ProductionTotalsResponse(BaseModel):
    """On-demand cost breakdown of a job."""

    production_job_id: int
    currency: str
    breakdown: CostBreakdownBlock
    totals: CostTotalsBlock
