"""
Production domain entities.

A production job is one print run; it accrues material consumption (as
ProductionCost rows) and labor hours, which together price the output.
"""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

JOB_NUMBER_FORMAT = "JOB-{:06d}"


class JobStatus(str, Enum):
    """Production job lifecycle states."""

    QUEUED = "QUEUED"
    IN_PROGRESS = "IN_PROGRESS"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class ProductionJob(BaseModel):
    """A unit of manufacturing work."""

    id: int | None = None
    job_number: str = ""
    name: str
    description: str | None = None
    status: JobStatus = JobStatus.QUEUED
    priority: int = Field(default=5, ge=1, le=10)
    estimated_hours: Decimal | None = None
    actual_hours: Decimal | None = None
    printer: str | None = None
    material: str | None = None  # free-text label shown to operators
    settings: dict[str, Any] = Field(default_factory=dict)
    files: list[str] = Field(default_factory=list)
    notes: str | None = None
    order_id: str | None = None
    product_id: int | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    started_at: datetime | None = None
    completed_at: datetime | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def labor_hours(self) -> Decimal:
        """Hours billed as labor: actual if recorded, else the estimate."""
        if self.actual_hours is not None:
            return self.actual_hours
        if self.estimated_hours is not None:
            return self.estimated_hours
        return Decimal("0")


class ProductionCost(BaseModel):
    """
    Material consumed by a job.

    ``unit_cost`` is a snapshot taken at consumption time, not a live
    reference to the batch or material.
    """

    id: int | None = None
    production_job_id: int
    material_id: int
    batch_id: int | None = None
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal
    notes: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    # Display-only, filled by store joins
    material_name: str | None = None
    material_unit: str | None = None


class CostLine(BaseModel):
    """Per-material line of a cost breakdown."""

    material_id: int
    material: str
    unit: str | None = None
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal


class CostBreakdown(BaseModel):
    """Computed, never stored, cost summary for one job."""

    production_job_id: int
    lines: list[CostLine] = Field(default_factory=list)
    material_cost: Decimal
    labor_hours: Decimal
    labor_rate_per_hour: Decimal
    labor_cost: Decimal
    total_cost: Decimal
    margin: Decimal
    suggested_price: Decimal

    @property
    def margin_percent(self) -> Decimal:
        return self.margin * 100


class ProductionStats(BaseModel):
    """Dashboard counters for the production floor."""

    total_jobs: int = 0
    active_jobs: int = 0
    queued_jobs: int = 0
    failed_jobs: int = 0
    completed_today: int = 0
    avg_completion_hours: Decimal = Decimal("0")
