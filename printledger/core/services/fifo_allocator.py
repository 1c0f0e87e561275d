"""
FIFO batch allocation.

Chooses the batch that satisfies a consumption request. Layer-pure: the
batch store is injected and this module never writes.
"""

from dataclasses import dataclass
from decimal import Decimal

from printledger.core.entities.batch import MaterialBatch
from printledger.core.entities.material import Material
from printledger.core.exceptions import (
    BatchNotFoundError,
    InsufficientQuantityError,
    InvalidArgumentError,
)
from printledger.core.interfaces.batch_store import IBatchStore


@dataclass(frozen=True)
class Allocation:
    """Batch chosen for a request and the unit cost it is charged at."""

    material_id: int
    quantity: Decimal
    unit_cost: Decimal
    batch: MaterialBatch | None = None

    @property
    def batch_id(self) -> int | None:
        return self.batch.id if self.batch is not None else None


def select_fifo_batch(
    batches: list[MaterialBatch], quantity: Decimal
) -> MaterialBatch | None:
    """
    Return the oldest active batch with stock left.

    Batches are ordered by purchase date, then id. A single batch serves
    the whole request; if the oldest one cannot cover it,
    InsufficientQuantityError is raised rather than splitting across lots.
    """
    eligible = [b for b in batches if b.is_active and b.current_qty > 0]
    if not eligible:
        return None
    oldest = min(eligible, key=lambda b: (b.purchase_date, b.id or 0))
    if oldest.current_qty < quantity:
        raise InsufficientQuantityError(
            quantity,
            oldest.current_qty,
            batch_id=oldest.id,
            material_id=oldest.material_id,
        )
    return oldest


class FifoAllocator:
    """Resolve the batch and unit cost for a consumption request."""

    def __init__(self, batch_store: IBatchStore):
        self._batches = batch_store

    async def allocate(
        self,
        material: Material,
        quantity: Decimal,
        batch_id: int | None = None,
    ) -> Allocation:
        """
        Allocate ``quantity`` of ``material``.

        A pinned batch must belong to the material, be active and hold the
        full quantity; there is no fallback to other batches. Without a pin
        the oldest eligible batch is used. A material with no eligible batch
        is costed at its average ``cost_per_unit`` with no batch reference.

        Raises:
            BatchNotFoundError: pinned batch does not exist
            InvalidArgumentError: pinned batch belongs elsewhere or is inactive
            InsufficientQuantityError: chosen batch cannot cover the request
        """
        if batch_id is not None:
            batch = await self._batches.get_batch(batch_id)
            if batch is None:
                raise BatchNotFoundError(batch_id)
            self._check_pinned(batch, material, quantity)
            return Allocation(
                material_id=material.id,
                quantity=quantity,
                unit_cost=batch.unit_cost,
                batch=batch,
            )

        candidates = await self._batches.list_available(material.id)
        batch = select_fifo_batch(candidates, quantity)
        if batch is None:
            return Allocation(
                material_id=material.id,
                quantity=quantity,
                unit_cost=material.cost_per_unit,
            )
        return Allocation(
            material_id=material.id,
            quantity=quantity,
            unit_cost=batch.unit_cost,
            batch=batch,
        )

    async def resolve_batch(
        self, material: Material, batch_id: int
    ) -> MaterialBatch:
        """Look up a batch referenced by a non-consuming movement."""
        batch = await self._batches.get_batch(batch_id)
        if batch is None:
            raise BatchNotFoundError(batch_id)
        if batch.material_id != material.id:
            raise InvalidArgumentError(
                "batch_id", f"batch belongs to material {batch.material_id}", batch_id
            )
        return batch

    @staticmethod
    def _check_pinned(batch: MaterialBatch, material: Material, quantity: Decimal) -> None:
        if batch.material_id != material.id:
            raise InvalidArgumentError(
                "batch_id", f"batch belongs to material {batch.material_id}", batch.id
            )
        if not batch.is_active:
            raise InvalidArgumentError("batch_id", "batch is inactive", batch.id)
        if batch.current_qty < quantity:
            raise InsufficientQuantityError(
                quantity,
                batch.current_qty,
                batch_id=batch.id,
                material_id=material.id,
            )
