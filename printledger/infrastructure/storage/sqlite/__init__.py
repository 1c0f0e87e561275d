"""SQLite storage implementations."""

from printledger.infrastructure.storage.sqlite.batch_store import SQLiteBatchStore
from printledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
    write_transaction,
)
from printledger.infrastructure.storage.sqlite.material_store import SQLiteMaterialStore
from printledger.infrastructure.storage.sqlite.movement_store import SQLiteMovementStore
from printledger.infrastructure.storage.sqlite.product_store import SQLiteProductStore
from printledger.infrastructure.storage.sqlite.production_store import SQLiteProductionStore
from printledger.infrastructure.storage.sqlite.sequence_store import SQLiteSequenceStore

# Singleton instances
_material_store: SQLiteMaterialStore | None = None
_batch_store: SQLiteBatchStore | None = None
_movement_store: SQLiteMovementStore | None = None
_production_store: SQLiteProductionStore | None = None
_product_store: SQLiteProductStore | None = None


async def get_material_store() -> SQLiteMaterialStore:
    """Get singleton material store instance."""
    global _material_store
    if _material_store is None:
        _material_store = SQLiteMaterialStore()
    return _material_store


async def get_batch_store() -> SQLiteBatchStore:
    """Get singleton batch store instance."""
    global _batch_store
    if _batch_store is None:
        _batch_store = SQLiteBatchStore()
    return _batch_store


async def get_movement_store() -> SQLiteMovementStore:
    """Get singleton movement store instance."""
    global _movement_store
    if _movement_store is None:
        _movement_store = SQLiteMovementStore()
    return _movement_store


async def get_production_store() -> SQLiteProductionStore:
    """Get singleton production store instance."""
    global _production_store
    if _production_store is None:
        _production_store = SQLiteProductionStore()
    return _production_store


async def get_product_store() -> SQLiteProductStore:
    """Get singleton product store instance."""
    global _product_store
    if _product_store is None:
        _product_store = SQLiteProductStore()
    return _product_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "write_transaction",
    # Store classes
    "SQLiteMaterialStore",
    "SQLiteBatchStore",
    "SQLiteMovementStore",
    "SQLiteProductionStore",
    "SQLiteProductStore",
    "SQLiteSequenceStore",
    # Factory functions
    "get_material_store",
    "get_batch_store",
    "get_movement_store",
    "get_production_store",
    "get_product_store",
]
