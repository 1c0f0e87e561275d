"""Adjust Material Stock Use Case: manual correction through the ledger."""

from printledger.application.dto.mappers import material_to_response, movement_to_response
from printledger.application.dto.requests import AdjustMaterialRequest
from printledger.application.dto.responses import AdjustMaterialResponse
from printledger.application.use_cases.record_movement import (
    MovementResult,
    RecordMovementUseCase,
    TransactionFactory,
    default_transaction,
)
from printledger.config import get_logger
from printledger.core.entities.movement import MovementType
from printledger.core.interfaces.batch_store import IBatchStore
from printledger.core.interfaces.material_store import IMaterialStore
from printledger.core.interfaces.movement_store import IMovementStore

logger = get_logger(__name__)

ADJUSTMENT_REFERENCE = "Manual adjustment"


class AdjustMaterialStockUseCase:
    """Correct a material's stock with a signed ADJUSTMENT, clamped at zero."""

    def __init__(
        self,
        material_store: IMaterialStore | None = None,
        batch_store: IBatchStore | None = None,
        movement_store: IMovementStore | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._transaction = transaction
        self._movements = RecordMovementUseCase(
            material_store=material_store,
            batch_store=batch_store,
            movement_store=movement_store,
        )

    async def execute(
        self, material_id: int, request: AdjustMaterialRequest
    ) -> MovementResult:
        """Execute adjust stock use case."""
        logger.info(
            "adjust_stock_started",
            material_id=material_id,
            quantity=request.quantity,
        )
        transaction = self._transaction or default_transaction()
        async with transaction():
            result = await self._movements.record(
                movement_type=MovementType.ADJUSTMENT,
                material_id=material_id,
                quantity=request.quantity,
                batch_id=request.batch_id,
                reference=ADJUSTMENT_REFERENCE,
                notes=request.reason,
                created_by=request.created_by,
            )
        logger.info(
            "adjust_stock_complete",
            material_id=material_id,
            applied=result.movement.quantity,
            stock_after=result.movement.stock_after,
        )
        return result

    def to_response(self, result: MovementResult) -> AdjustMaterialResponse:
        """Convert result to API response."""
        return AdjustMaterialResponse(
            material=material_to_response(result.material),
            movement=movement_to_response(result.movement),
        )
