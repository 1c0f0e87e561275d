"""
Record Movement Use Case: the single write path into the ledger.

One call appends one movement, applies its delta to the material's stock
and, where a batch is involved, updates the batch. All of it runs in one
write transaction, so either everything applies or nothing does.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from printledger.application.dto.mappers import movement_to_response
from printledger.application.dto.requests import RecordMovementRequest
from printledger.application.dto.responses import MovementResponse
from printledger.config import get_logger
from printledger.core.entities.batch import MaterialBatch
from printledger.core.entities.material import Material
from printledger.core.entities.movement import (
    OUTBOUND_TYPES,
    InventoryMovement,
    MovementType,
)
from printledger.core.exceptions import MaterialNotFoundError
from printledger.core.interfaces.batch_store import IBatchStore
from printledger.core.interfaces.material_store import IMaterialStore
from printledger.core.interfaces.movement_store import IMovementStore
from printledger.core.services.fifo_allocator import FifoAllocator
from printledger.core.services.movement_rules import (
    movement_cost,
    plan_movement,
    stored_quantity,
    validate_quantity,
)

logger = get_logger(__name__)

# Async context manager factory that wraps a unit of work
TransactionFactory = Callable[[], Any]


def default_transaction() -> TransactionFactory:
    from printledger.infrastructure.storage.sqlite import write_transaction

    return write_transaction


@dataclass
class MovementResult:
    """A recorded movement and the state it left behind."""

    movement: InventoryMovement
    material: Material
    batch: MaterialBatch | None = None


class RecordMovementUseCase:
    """Append a movement with its stock and batch effects."""

    def __init__(
        self,
        material_store: IMaterialStore | None = None,
        batch_store: IBatchStore | None = None,
        movement_store: IMovementStore | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._material_store = material_store
        self._batch_store = batch_store
        self._movement_store = movement_store
        self._transaction = transaction

    async def _get_material_store(self) -> IMaterialStore:
        if self._material_store is None:
            from printledger.infrastructure.storage.sqlite import get_material_store

            self._material_store = await get_material_store()
        return self._material_store

    async def _get_batch_store(self) -> IBatchStore:
        if self._batch_store is None:
            from printledger.infrastructure.storage.sqlite import get_batch_store

            self._batch_store = await get_batch_store()
        return self._batch_store

    async def _get_movement_store(self) -> IMovementStore:
        if self._movement_store is None:
            from printledger.infrastructure.storage.sqlite import get_movement_store

            self._movement_store = await get_movement_store()
        return self._movement_store

    def _get_transaction(self) -> TransactionFactory:
        if self._transaction is None:
            self._transaction = default_transaction()
        return self._transaction

    async def execute(self, request: RecordMovementRequest) -> MovementResult:
        """Execute record movement use case."""
        async with self._get_transaction()():
            return await self.record(
                movement_type=request.type,
                material_id=request.material_id,
                quantity=request.quantity,
                batch_id=request.batch_id,
                production_job_id=request.production_job_id,
                reference=request.reference,
                notes=request.notes,
                created_by=request.created_by,
            )

    async def record(
        self,
        movement_type: MovementType,
        material_id: int,
        quantity: Decimal,
        batch_id: int | None = None,
        production_job_id: int | None = None,
        reference: str | None = None,
        notes: str | None = None,
        created_by: str | None = None,
    ) -> MovementResult:
        """
        Record a movement. Must be called inside a write transaction.

        Consumption and waste go through the FIFO allocator when no batch is
        pinned; the allocator runs before the aggregate stock check so a
        short batch reports InsufficientQuantityError. An adjustment with a
        batch is clamped to what both the stock and the batch can absorb.

        Raises:
            MaterialNotFoundError: unknown material
            BatchNotFoundError: unknown batch
            InvalidArgumentError: bad quantity or batch of another material
            InsufficientQuantityError: batch cannot cover the consumption
            InsufficientStockError: aggregate stock cannot cover the consumption
        """
        logger.info(
            "record_movement_started",
            type=movement_type.value,
            material_id=material_id,
            quantity=quantity,
            batch_id=batch_id,
        )

        validate_quantity(movement_type, quantity)

        materials = await self._get_material_store()
        batches = await self._get_batch_store()
        material = await materials.get_material(material_id)
        if material is None:
            raise MaterialNotFoundError(material_id)

        allocator = FifoAllocator(batches)
        batch: MaterialBatch | None = None
        if movement_type in OUTBOUND_TYPES:
            allocation = await allocator.allocate(material, quantity, batch_id)
            batch = allocation.batch
            unit_cost = allocation.unit_cost
        elif batch_id is not None:
            batch = await allocator.resolve_batch(material, batch_id)
            unit_cost = batch.unit_cost
        else:
            unit_cost = material.cost_per_unit

        room = None
        if batch is not None and movement_type == MovementType.ADJUSTMENT:
            room = (-batch.current_qty, batch.original_qty - batch.current_qty)
        plan = plan_movement(
            movement_type, quantity, material.id, material.stock, batch_room=room
        )

        stock_after = material.stock
        if plan.touches_stock:
            stock_after = await materials.adjust_stock(material.id, plan.stock_delta)

        if batch is not None:
            if movement_type in OUTBOUND_TYPES:
                batch = await batches.decrement_batch(batch.id, quantity)
            elif movement_type == MovementType.ADJUSTMENT and plan.touches_stock:
                batch = await batches.adjust_batch(batch.id, plan.stock_delta)

        signed = stored_quantity(plan)
        now = datetime.now(UTC)
        movement = InventoryMovement(
            type=movement_type,
            material_id=material.id,
            batch_id=batch.id if batch is not None else None,
            production_job_id=production_job_id,
            quantity=signed,
            unit_cost=unit_cost,
            total_cost=movement_cost(signed, unit_cost),
            stock_after=stock_after,
            reference=reference,
            notes=notes,
            movement_date=now,
            created_by=created_by,
        )
        movement = await (await self._get_movement_store()).add_movement(movement)

        material.stock = stock_after
        logger.info(
            "record_movement_complete",
            movement_number=movement.movement_number,
            stock_after=stock_after,
        )
        return MovementResult(movement=movement, material=material, batch=batch)

    def to_response(self, result: MovementResult) -> MovementResponse:
        """Convert result to API response."""
        return movement_to_response(result.movement)
