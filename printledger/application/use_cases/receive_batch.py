"""Receive Batch Use Case: a purchase lot plus its PURCHASE movement."""

from dataclasses import dataclass
from datetime import UTC, date, datetime

from printledger.application.dto.mappers import batch_to_response, movement_to_response
from printledger.application.dto.requests import CreateBatchRequest
from printledger.application.dto.responses import CreateBatchResponse
from printledger.application.use_cases.record_movement import (
    RecordMovementUseCase,
    TransactionFactory,
    default_transaction,
)
from printledger.config import InventorySettings, get_logger, get_settings
from printledger.core.entities.batch import MaterialBatch
from printledger.core.entities.material import Material
from printledger.core.entities.movement import InventoryMovement, MovementType
from printledger.core.exceptions import InvalidArgumentError, MaterialNotFoundError
from printledger.core.interfaces.batch_store import IBatchStore
from printledger.core.interfaces.material_store import IMaterialStore
from printledger.core.interfaces.movement_store import IMovementStore

logger = get_logger(__name__)


@dataclass
class ReceiveBatchResult:
    batch: MaterialBatch
    movement: InventoryMovement
    material: Material


def validate_batch(request: CreateBatchRequest, purchase_date: date) -> None:
    if request.original_qty <= 0:
        raise InvalidArgumentError(
            "original_qty", "must be greater than zero", request.original_qty
        )
    if request.unit_cost < 0:
        raise InvalidArgumentError("unit_cost", "must be non-negative", request.unit_cost)
    if request.expiry_date is not None and request.expiry_date < purchase_date:
        raise InvalidArgumentError(
            "expiry_date", "must not precede the purchase date", request.expiry_date
        )


class ReceiveBatchUseCase:
    """
    Receive a purchase lot.

    Creates the batch with ``current_qty = original_qty``, raises the
    material's stock by the same amount and appends the PURCHASE movement,
    all in one transaction.
    """

    def __init__(
        self,
        material_store: IMaterialStore | None = None,
        batch_store: IBatchStore | None = None,
        movement_store: IMovementStore | None = None,
        transaction: TransactionFactory | None = None,
        settings: InventorySettings | None = None,
    ):
        self._material_store = material_store
        self._batch_store = batch_store
        self._transaction = transaction
        self._settings = settings
        self._movements = RecordMovementUseCase(
            material_store=material_store,
            batch_store=batch_store,
            movement_store=movement_store,
        )

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

    def _get_settings(self) -> InventorySettings:
        if self._settings is None:
            self._settings = get_settings().inventory
        return self._settings

    async def execute(self, request: CreateBatchRequest) -> ReceiveBatchResult:
        """Execute receive batch use case."""
        purchase_date = request.purchase_date or datetime.now(UTC).date()
        logger.info(
            "receive_batch_started",
            material_id=request.material_id,
            qty=request.original_qty,
            unit_cost=request.unit_cost,
        )
        validate_batch(request, purchase_date)

        transaction = self._transaction or default_transaction()
        async with transaction():
            materials = await self._get_material_store()
            if await materials.get_material(request.material_id) is None:
                raise MaterialNotFoundError(request.material_id)

            batches = await self._get_batch_store()
            batch = await batches.create_batch(
                MaterialBatch(
                    material_id=request.material_id,
                    purchase_date=purchase_date,
                    supplier=request.supplier,
                    invoice_number=request.invoice_number,
                    original_qty=request.original_qty,
                    current_qty=request.original_qty,
                    unit_cost=request.unit_cost,
                    expiry_date=request.expiry_date,
                )
            )

            result = await self._movements.record(
                movement_type=MovementType.PURCHASE,
                material_id=request.material_id,
                quantity=request.original_qty,
                batch_id=batch.id,
                reference=request.invoice_number or f"Batch {batch.batch_number}",
                notes=f"Batch {batch.batch_number} received",
                created_by=request.created_by,
            )

        logger.info(
            "receive_batch_complete",
            batch_number=batch.batch_number,
            movement_number=result.movement.movement_number,
            stock_after=result.movement.stock_after,
        )
        return ReceiveBatchResult(
            batch=batch, movement=result.movement, material=result.material
        )

    def to_response(self, result: ReceiveBatchResult) -> CreateBatchResponse:
        """Convert result to API response."""
        settings = self._get_settings()
        return CreateBatchResponse(
            batch=batch_to_response(
                result.batch,
                today=datetime.now(UTC).date(),
                near_expiry_days=settings.near_expiry_days,
                material=result.material,
            ),
            movement=movement_to_response(result.movement),
        )
