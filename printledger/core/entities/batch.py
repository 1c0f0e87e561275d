"""Material batch (purchase lot) entity."""

from datetime import UTC, date, datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from pydantic import BaseModel, Field

BATCH_NUMBER_FORMAT = "BATCH-{:06d}"


class BatchStatus(str, Enum):
    """Derived lifecycle status of a batch. Never persisted."""

    ACTIVE = "active"
    NEAR_EXPIRY = "near_expiry"
    EXPIRED = "expired"
    DEPLETED = "depleted"
    INACTIVE = "inactive"


class MaterialBatch(BaseModel):
    """
    One purchase lot of a material.

    ``original_qty`` and ``unit_cost`` are fixed at creation; ``current_qty``
    stays within ``[0, original_qty]``.
    """

    id: int | None = None
    batch_number: str = ""
    material_id: int
    purchase_date: date
    supplier: str | None = None
    invoice_number: str | None = None
    original_qty: Decimal
    current_qty: Decimal
    unit_cost: Decimal
    expiry_date: date | None = None
    is_active: bool = True
    version: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def total_cost(self) -> Decimal:
        """Cost basis of the whole lot."""
        return self.original_qty * self.unit_cost

    @property
    def usage_percentage(self) -> Decimal:
        """Share of the lot already consumed, in percent (2 dp)."""
        if self.original_qty <= 0:
            return Decimal("0.00")
        used = (self.original_qty - self.current_qty) / self.original_qty * 100
        return used.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def days_until_expiry(self, today: date) -> int | None:
        if self.expiry_date is None:
            return None
        return (self.expiry_date - today).days
