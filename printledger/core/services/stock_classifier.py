"""
Stock health classification.

Pure functions evaluated on read. Nothing here is persisted, so a status is
always consistent with the latest committed quantities.
"""

from datetime import date
from decimal import Decimal

from printledger.core.entities.batch import BatchStatus, MaterialBatch
from printledger.core.entities.material import Material, StockStatus

DEFAULT_NEAR_EXPIRY_DAYS = 30


def classify_material_stock(
    stock: Decimal,
    min_stock: Decimal,
    max_stock: Decimal | None = None,
) -> StockStatus:
    """Map aggregate stock against its thresholds."""
    if stock == 0:
        return StockStatus.CRITICAL
    if stock <= min_stock:
        return StockStatus.LOW
    if max_stock is not None and stock > max_stock:
        return StockStatus.OVERSTOCK
    return StockStatus.NORMAL


def classify_material(material: Material) -> StockStatus:
    return classify_material_stock(material.stock, material.min_stock, material.max_stock)


def classify_batch(
    batch: MaterialBatch,
    today: date,
    near_expiry_days: int = DEFAULT_NEAR_EXPIRY_DAYS,
) -> BatchStatus:
    """
    Derive a batch's lifecycle status.

    Checks run in precedence order: inactive, expired, near expiry,
    depleted. Expiry is compared at day granularity, so a batch expiring
    exactly ``near_expiry_days`` from ``today`` is near expiry and one a day
    later is active.
    """
    if not batch.is_active:
        return BatchStatus.INACTIVE

    days = batch.days_until_expiry(today)
    if days is not None:
        if days < 0:
            return BatchStatus.EXPIRED
        if days <= near_expiry_days:
            return BatchStatus.NEAR_EXPIRY

    if batch.current_qty <= 0:
        return BatchStatus.DEPLETED
    return BatchStatus.ACTIVE
