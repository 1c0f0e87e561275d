"""Core domain entities."""

from printledger.core.entities.batch import (
    BATCH_NUMBER_FORMAT,
    BatchStatus,
    MaterialBatch,
)
from printledger.core.entities.material import Material, StockStatus
from printledger.core.entities.movement import (
    INBOUND_TYPES,
    MOVEMENT_NUMBER_FORMAT,
    OUTBOUND_TYPES,
    InventoryMovement,
    MovementImpact,
    MovementType,
)
from printledger.core.entities.product import Product
from printledger.core.entities.production import (
    JOB_NUMBER_FORMAT,
    CostBreakdown,
    CostLine,
    JobStatus,
    ProductionCost,
    ProductionJob,
    ProductionStats,
)

__all__ = [
    # Material entities
    "Material",
    "StockStatus",
    # Batch entities
    "MaterialBatch",
    "BatchStatus",
    "BATCH_NUMBER_FORMAT",
    # Movement entities
    "InventoryMovement",
    "MovementType",
    "MovementImpact",
    "INBOUND_TYPES",
    "OUTBOUND_TYPES",
    "MOVEMENT_NUMBER_FORMAT",
    # Production entities
    "ProductionJob",
    "ProductionCost",
    "JobStatus",
    "CostLine",
    "CostBreakdown",
    "ProductionStats",
    "JOB_NUMBER_FORMAT",
    # Catalog
    "Product",
]
