"""Core interfaces (ports) for dependency injection."""

from printledger.core.interfaces.batch_store import IBatchStore
from printledger.core.interfaces.material_store import IMaterialStore
from printledger.core.interfaces.movement_store import IMovementStore
from printledger.core.interfaces.product_store import IProductStore
from printledger.core.interfaces.production_store import IProductionStore

__all__ = [
    # Storage interfaces
    "IMaterialStore",
    "IBatchStore",
    "IMovementStore",
    "IProductionStore",
    "IProductStore",
]
