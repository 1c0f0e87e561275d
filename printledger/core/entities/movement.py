"""Inventory movement entity: one immutable ledger row."""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

MOVEMENT_NUMBER_FORMAT = "MOV-{:08d}"


class MovementType(str, Enum):
    """Types of stock-affecting events."""

    PURCHASE = "PURCHASE"
    CONSUMPTION = "CONSUMPTION"
    ADJUSTMENT = "ADJUSTMENT"
    TRANSFER = "TRANSFER"
    WASTE = "WASTE"
    RETURN = "RETURN"


class MovementImpact(str, Enum):
    """Direction a movement type pushes aggregate stock."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


INBOUND_TYPES = frozenset({MovementType.PURCHASE, MovementType.RETURN})
OUTBOUND_TYPES = frozenset({MovementType.CONSUMPTION, MovementType.WASTE})


class InventoryMovement(BaseModel):
    """
    Records a single stock-affecting event.

    ``quantity`` is signed (negative for consumption and waste) and
    ``stock_after`` is the material stock right after this row applied.
    Rows are never edited; corrections are new ADJUSTMENT rows.
    """

    id: int | None = None
    movement_number: str = ""
    type: MovementType
    material_id: int
    batch_id: int | None = None
    production_job_id: int | None = None
    quantity: Decimal
    unit_cost: Decimal = Decimal("0")
    total_cost: Decimal = Decimal("0")
    stock_after: Decimal
    reference: str | None = None
    notes: str | None = None
    movement_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
    created_by: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def stock_delta(self) -> Decimal:
        """Net change this row made to the material's aggregate stock."""
        if self.type == MovementType.TRANSFER:
            return Decimal("0")
        return self.quantity

    @property
    def impact(self) -> MovementImpact:
        if self.type in INBOUND_TYPES:
            return MovementImpact.POSITIVE
        if self.type in OUTBOUND_TYPES:
            return MovementImpact.NEGATIVE
        return MovementImpact.NEUTRAL
