"""Add Production Cost Use Case: consume material for a job."""

from dataclasses import dataclass

from printledger.application.dto.mappers import cost_to_response, movement_to_response
from printledger.application.dto.requests import AddProductionCostRequest
from printledger.application.dto.responses import AddProductionCostResponse
from printledger.application.use_cases.record_movement import (
    RecordMovementUseCase,
    TransactionFactory,
    default_transaction,
)
from printledger.config import get_logger
from printledger.core.entities.movement import InventoryMovement, MovementType
from printledger.core.entities.production import ProductionCost
from printledger.core.exceptions import InvalidArgumentError, ProductionJobNotFoundError
from printledger.core.interfaces.batch_store import IBatchStore
from printledger.core.interfaces.material_store import IMaterialStore
from printledger.core.interfaces.movement_store import IMovementStore
from printledger.core.interfaces.production_store import IProductionStore

logger = get_logger(__name__)


@dataclass
class AddProductionCostResult:
    cost: ProductionCost
    movement: InventoryMovement


class AddProductionCostUseCase:
    """
    Record material consumed by a production job.

    The batch (pinned or FIFO) and its unit cost are resolved by the
    movement ledger; the cost row freezes that unit cost. Cost row,
    CONSUMPTION movement, stock and batch updates commit together.
    """

    def __init__(
        self,
        production_store: IProductionStore | None = None,
        material_store: IMaterialStore | None = None,
        batch_store: IBatchStore | None = None,
        movement_store: IMovementStore | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._production_store = production_store
        self._transaction = transaction
        self._movements = RecordMovementUseCase(
            material_store=material_store,
            batch_store=batch_store,
            movement_store=movement_store,
        )

    async def _get_production_store(self) -> IProductionStore:
        if self._production_store is None:
            from printledger.infrastructure.storage.sqlite import get_production_store

            self._production_store = await get_production_store()
        return self._production_store

    async def execute(self, request: AddProductionCostRequest) -> AddProductionCostResult:
        """Execute add production cost use case."""
        logger.info(
            "add_production_cost_started",
            job_id=request.production_job_id,
            material_id=request.material_id,
            quantity=request.quantity,
            batch_id=request.batch_id,
        )
        if request.quantity <= 0:
            raise InvalidArgumentError(
                "quantity", "must be greater than zero", request.quantity
            )

        transaction = self._transaction or default_transaction()
        async with transaction():
            store = await self._get_production_store()
            job = await store.get_job(request.production_job_id)
            if job is None:
                raise ProductionJobNotFoundError(request.production_job_id)

            result = await self._movements.record(
                movement_type=MovementType.CONSUMPTION,
                material_id=request.material_id,
                quantity=request.quantity,
                batch_id=request.batch_id,
                production_job_id=job.id,
                reference=f"Production {job.job_number}",
                notes=f"Consumed for production: {job.name}",
                created_by=request.created_by,
            )
            movement = result.movement

            cost = await store.add_cost(
                ProductionCost(
                    production_job_id=job.id,
                    material_id=request.material_id,
                    batch_id=movement.batch_id,
                    quantity=request.quantity,
                    unit_cost=movement.unit_cost,
                    total_cost=movement.total_cost,
                    notes=request.notes,
                    material_name=result.material.name,
                    material_unit=result.material.unit,
                )
            )

        logger.info(
            "add_production_cost_complete",
            cost_id=cost.id,
            batch_id=cost.batch_id,
            total_cost=cost.total_cost,
        )
        return AddProductionCostResult(cost=cost, movement=movement)

    def to_response(self, result: AddProductionCostResult) -> AddProductionCostResponse:
        """Convert result to API response."""
        return AddProductionCostResponse(
            cost=cost_to_response(result.cost),
            movement=movement_to_response(result.movement),
        )
