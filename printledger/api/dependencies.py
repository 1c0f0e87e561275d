"""
Dependency injection container for FastAPI.

Provides use case and store instances to route handlers.
"""

from functools import lru_cache

from printledger.application.use_cases import (
    AddProductionCostUseCase,
    AdjustMaterialStockUseCase,
    ComputeProductionTotalsUseCase,
    CreateMaterialUseCase,
    CreateProductionJobUseCase,
    DeleteProductionJobUseCase,
    ReceiveBatchUseCase,
    RecordMovementUseCase,
    UpdateProductionJobUseCase,
)
from printledger.config import Settings, get_settings
from printledger.infrastructure.storage.sqlite import (
    SQLiteBatchStore,
    SQLiteMaterialStore,
    SQLiteMovementStore,
    SQLiteProductionStore,
    get_batch_store,
    get_material_store,
    get_movement_store,
    get_production_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Use case dependencies
def get_create_material_use_case() -> CreateMaterialUseCase:
    """Get create material use case."""
    return CreateMaterialUseCase()


def get_adjust_material_use_case() -> AdjustMaterialStockUseCase:
    """Get adjust material stock use case."""
    return AdjustMaterialStockUseCase()


def get_receive_batch_use_case() -> ReceiveBatchUseCase:
    """Get receive batch use case."""
    return ReceiveBatchUseCase()


def get_record_movement_use_case() -> RecordMovementUseCase:
    """Get record movement use case."""
    return RecordMovementUseCase()


def get_add_production_cost_use_case() -> AddProductionCostUseCase:
    """Get add production cost use case."""
    return AddProductionCostUseCase()


def get_production_totals_use_case() -> ComputeProductionTotalsUseCase:
    """Get compute production totals use case."""
    return ComputeProductionTotalsUseCase()


def get_create_job_use_case() -> CreateProductionJobUseCase:
    """Get create production job use case."""
    return CreateProductionJobUseCase()


def get_update_job_use_case() -> UpdateProductionJobUseCase:
    """Get update production job use case."""
    return UpdateProductionJobUseCase()


def get_delete_job_use_case() -> DeleteProductionJobUseCase:
    """Get delete production job use case."""
    return DeleteProductionJobUseCase()


# Store dependencies
async def get_mat_store() -> SQLiteMaterialStore:
    """Get material store."""
    return await get_material_store()


async def get_lot_store() -> SQLiteBatchStore:
    """Get batch store."""
    return await get_batch_store()


async def get_mov_store() -> SQLiteMovementStore:
    """Get movement store."""
    return await get_movement_store()


async def get_prod_store() -> SQLiteProductionStore:
    """Get production store."""
    return await get_production_store()
