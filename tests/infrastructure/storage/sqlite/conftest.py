"""Pytest fixtures for SQLite storage tests."""

from datetime import date
from decimal import Decimal

import pytest

from printledger.core.entities import Material, MaterialBatch
from printledger.infrastructure.storage.sqlite import (
    SQLiteBatchStore,
    SQLiteMaterialStore,
    SQLiteMovementStore,
    SQLiteProductionStore,
    SQLiteProductStore,
)


@pytest.fixture
def material_store() -> SQLiteMaterialStore:
    return SQLiteMaterialStore()


@pytest.fixture
def batch_store() -> SQLiteBatchStore:
    return SQLiteBatchStore()


@pytest.fixture
def movement_store() -> SQLiteMovementStore:
    return SQLiteMovementStore()


@pytest.fixture
def production_store() -> SQLiteProductionStore:
    return SQLiteProductionStore()


@pytest.fixture
def product_store() -> SQLiteProductStore:
    return SQLiteProductStore()


@pytest.fixture
async def stored_material(ledger_db, material_store: SQLiteMaterialStore) -> Material:
    """A persisted material with zero stock."""
    return await material_store.create_material(
        Material(
            name="PETG Clear 1.75mm",
            type="PETG",
            unit="kg",
            min_stock=Decimal("5"),
            cost_per_unit=Decimal("3.20"),
        )
    )


@pytest.fixture
def make_batch():
    """Factory for unsaved batches with sensible defaults."""

    def _make(material_id: int, **overrides) -> MaterialBatch:
        values = {
            "material_id": material_id,
            "purchase_date": date(2024, 1, 10),
            "original_qty": Decimal("100"),
            "current_qty": Decimal("100"),
            "unit_cost": Decimal("2.50"),
        }
        values.update(overrides)
        return MaterialBatch(**values)

    return _make
