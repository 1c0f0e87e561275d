"""
Movement arithmetic.

Turns a requested (type, quantity) into the signed delta that is applied to
aggregate stock and the quantity stored on the ledger row. Layer-pure: no
storage access, the caller supplies the current stock.
"""

from dataclasses import dataclass
from decimal import Decimal

from printledger.core.entities.movement import INBOUND_TYPES, OUTBOUND_TYPES, MovementType
from printledger.core.exceptions import InsufficientStockError, InvalidArgumentError
from printledger.core.services.money import quantize_money

ZERO = Decimal("0")


@dataclass(frozen=True)
class MovementPlan:
    """Stock effect of a movement before it is written."""

    type: MovementType
    requested: Decimal
    stock_delta: Decimal

    @property
    def touches_stock(self) -> bool:
        return self.stock_delta != 0


def validate_quantity(movement_type: MovementType, quantity: Decimal) -> None:
    """Adjustments are signed and non-zero; everything else must be positive."""
    if movement_type == MovementType.ADJUSTMENT:
        if quantity == 0:
            raise InvalidArgumentError("quantity", "adjustment must be non-zero", quantity)
        return
    if quantity <= 0:
        raise InvalidArgumentError("quantity", "must be greater than zero", quantity)


def signed_delta(movement_type: MovementType, quantity: Decimal) -> Decimal:
    """Requested change to aggregate stock, before clamping."""
    if movement_type in INBOUND_TYPES:
        return quantity
    if movement_type in OUTBOUND_TYPES:
        return -quantity
    if movement_type == MovementType.ADJUSTMENT:
        return quantity
    # TRANSFER is an audit marker with no net effect on stock
    return ZERO


def plan_movement(
    movement_type: MovementType,
    quantity: Decimal,
    material_id: int,
    current_stock: Decimal,
    batch_room: tuple[Decimal, Decimal] | None = None,
) -> MovementPlan:
    """
    Validate a movement against the current stock and compute its delta.

    An adjustment pinned to a batch passes ``batch_room``, the lowest and
    highest delta the batch can absorb; the applied delta stays inside it.

    Raises:
        InvalidArgumentError: quantity is zero or has the wrong sign
        InsufficientStockError: consumption or waste exceeds current stock
    """
    validate_quantity(movement_type, quantity)

    if movement_type in OUTBOUND_TYPES and current_stock < quantity:
        raise InsufficientStockError(material_id, quantity, current_stock)

    delta = signed_delta(movement_type, quantity)
    if movement_type == MovementType.ADJUSTMENT:
        delta = clamp_delta(current_stock, delta)
        if batch_room is not None:
            low, high = batch_room
            delta = min(max(delta, low), high)

    return MovementPlan(type=movement_type, requested=quantity, stock_delta=delta)


def clamp_delta(current: Decimal, delta: Decimal) -> Decimal:
    """Largest part of ``delta`` that keeps ``current + delta`` non-negative."""
    if current + delta < 0:
        return -current
    return delta


def stored_quantity(plan: MovementPlan) -> Decimal:
    """Quantity written on the ledger row (signed, except for transfers)."""
    if plan.type == MovementType.TRANSFER:
        return plan.requested
    return plan.stock_delta


def movement_cost(quantity: Decimal, unit_cost: Decimal) -> Decimal:
    return quantize_money(abs(quantity) * unit_cost)
