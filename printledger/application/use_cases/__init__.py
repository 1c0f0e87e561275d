"""Application use cases."""

from printledger.application.use_cases.add_production_cost import (
    AddProductionCostResult,
    AddProductionCostUseCase,
)
from printledger.application.use_cases.adjust_material_stock import AdjustMaterialStockUseCase
from printledger.application.use_cases.compute_production_totals import (
    ComputeProductionTotalsUseCase,
)
from printledger.application.use_cases.create_material import (
    CreateMaterialResult,
    CreateMaterialUseCase,
)
from printledger.application.use_cases.manage_production_job import (
    CreateProductionJobUseCase,
    DeleteProductionJobUseCase,
    UpdateProductionJobUseCase,
)
from printledger.application.use_cases.receive_batch import (
    ReceiveBatchResult,
    ReceiveBatchUseCase,
)
from printledger.application.use_cases.record_movement import (
    MovementResult,
    RecordMovementUseCase,
)

__all__ = [
    "CreateMaterialUseCase",
    "CreateMaterialResult",
    "AdjustMaterialStockUseCase",
    "ReceiveBatchUseCase",
    "ReceiveBatchResult",
    "RecordMovementUseCase",
    "MovementResult",
    "AddProductionCostUseCase",
    "AddProductionCostResult",
    "ComputeProductionTotalsUseCase",
    "CreateProductionJobUseCase",
    "UpdateProductionJobUseCase",
    "DeleteProductionJobUseCase",
]
