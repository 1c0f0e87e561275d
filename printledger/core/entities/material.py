"""
Material domain entity.

A raw-material SKU (filament, resin, powder, ...) with its aggregate stock,
reorder thresholds and average unit cost.
"""

from datetime import UTC, datetime
from decimal import ROUND_FLOOR, Decimal
from enum import Enum

from pydantic import BaseModel, Field


class StockStatus(str, Enum):
    """Derived stock health of a material. Never persisted."""

    CRITICAL = "critical"
    LOW = "low"
    NORMAL = "normal"
    OVERSTOCK = "overstock"


class Material(BaseModel):
    """
    A raw material tracked by the ledger.

    ``stock`` is only ever changed through the material store's
    ``adjust_stock`` so that every change has a matching movement.
    """

    id: int | None = None
    name: str
    type: str
    unit: str
    stock: Decimal = Decimal("0")
    min_stock: Decimal = Decimal("0")
    max_stock: Decimal | None = None
    cost_per_unit: Decimal = Decimal("0")
    supplier: str | None = None
    location: str | None = None
    version: int = 0
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def stock_value(self) -> Decimal:
        """Value of stock on hand at the average unit cost."""
        return self.stock * self.cost_per_unit

    @property
    def days_of_stock(self) -> int | None:
        """Rough cover in days, treating min_stock as a month of usage."""
        if self.min_stock <= 0:
            return None
        cover = self.stock / self.min_stock * 30
        return int(cover.to_integral_value(rounding=ROUND_FLOOR))
