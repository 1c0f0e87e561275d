"""Create Material Use Case."""

from dataclasses import dataclass
from decimal import Decimal

from printledger.application.dto.mappers import material_to_response, movement_to_response
from printledger.application.dto.requests import CreateMaterialRequest
from printledger.application.dto.responses import CreateMaterialResponse
from printledger.application.use_cases.record_movement import (
    RecordMovementUseCase,
    TransactionFactory,
    default_transaction,
)
from printledger.config import get_logger
from printledger.core.entities.material import Material
from printledger.core.entities.movement import InventoryMovement, MovementType
from printledger.core.exceptions import InvalidArgumentError
from printledger.core.interfaces.batch_store import IBatchStore
from printledger.core.interfaces.material_store import IMaterialStore
from printledger.core.interfaces.movement_store import IMovementStore

logger = get_logger(__name__)

INITIAL_STOCK_NOTE = "Initial stock"


@dataclass
class CreateMaterialResult:
    material: Material
    movement: InventoryMovement | None = None


def validate_material(request: CreateMaterialRequest) -> None:
    if request.stock < 0:
        raise InvalidArgumentError("stock", "must be non-negative", request.stock)
    if request.min_stock < 0:
        raise InvalidArgumentError("min_stock", "must be non-negative", request.min_stock)
    if request.cost_per_unit < 0:
        raise InvalidArgumentError(
            "cost_per_unit", "must be non-negative", request.cost_per_unit
        )
    if request.max_stock is not None and request.max_stock < request.min_stock:
        raise InvalidArgumentError(
            "max_stock", "must not be below min_stock", request.max_stock
        )


class CreateMaterialUseCase:
    """
    Register a material.

    A non-zero initial stock is booked as an ADJUSTMENT movement in the same
    transaction, so the ledger accounts for every unit from the first row.
    """

    def __init__(
        self,
        material_store: IMaterialStore | None = None,
        batch_store: IBatchStore | None = None,
        movement_store: IMovementStore | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._material_store = material_store
        self._transaction = transaction
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

    async def execute(self, request: CreateMaterialRequest) -> CreateMaterialResult:
        """Execute create material use case."""
        logger.info("create_material_started", name=request.name, type=request.type)
        validate_material(request)

        transaction = self._transaction or default_transaction()
        async with transaction():
            store = await self._get_material_store()
            material = await store.create_material(
                Material(
                    name=request.name,
                    type=request.type,
                    unit=request.unit,
                    min_stock=request.min_stock,
                    max_stock=request.max_stock,
                    cost_per_unit=request.cost_per_unit,
                    supplier=request.supplier,
                    location=request.location,
                )
            )

            movement = None
            if request.stock > 0:
                result = await self._movements.record(
                    movement_type=MovementType.ADJUSTMENT,
                    material_id=material.id,
                    quantity=request.stock,
                    reference=INITIAL_STOCK_NOTE,
                    notes=INITIAL_STOCK_NOTE,
                )
                material = result.material
                movement = result.movement
            else:
                material.stock = Decimal("0")

        logger.info("create_material_complete", material_id=material.id, stock=material.stock)
        return CreateMaterialResult(material=material, movement=movement)

    def to_response(self, result: CreateMaterialResult) -> CreateMaterialResponse:
        """Convert result to API response."""
        return CreateMaterialResponse(
            material=material_to_response(result.material),
            movement=movement_to_response(result.movement) if result.movement else None,
        )
