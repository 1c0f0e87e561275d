"""Pytest configuration and fixtures."""

import os
import tempfile
from collections.abc import AsyncGenerator
from contextlib import nullcontext
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

# Keep the default data directory out of the working tree
os.environ.setdefault("STORAGE_DATA_DIR", tempfile.mkdtemp(prefix="printledger-tests-"))

from printledger.config import InventorySettings  # noqa: E402
from printledger.core.entities import (  # noqa: E402
    Material,
    MaterialBatch,
    ProductionJob,
)


@pytest.fixture
def no_transaction():
    """Transaction factory for use cases running against mocked stores."""
    return nullcontext


@pytest.fixture
def inventory_settings() -> InventorySettings:
    return InventorySettings(
        labor_rate_per_hour=Decimal("15.00"),
        margin=Decimal("0.40"),
        near_expiry_days=30,
        currency="PEN",
    )


@pytest.fixture
def sample_material() -> Material:
    return Material(
        id=1,
        name="PLA Black 1.75mm",
        type="PLA",
        unit="kg",
        stock=Decimal("100"),
        min_stock=Decimal("10"),
        cost_per_unit=Decimal("2.50"),
    )


@pytest.fixture
def sample_batch() -> MaterialBatch:
    return MaterialBatch(
        id=1,
        batch_number="BATCH-000001",
        material_id=1,
        purchase_date=date(2024, 1, 10),
        original_qty=Decimal("100"),
        current_qty=Decimal("100"),
        unit_cost=Decimal("2.50"),
    )


@pytest.fixture
def sample_job() -> ProductionJob:
    return ProductionJob(
        id=1,
        job_number="JOB-000001",
        name="Phone stand x10",
        estimated_hours=Decimal("4"),
    )


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "ledger.db"


@pytest.fixture
def storage_settings(temp_db_path: Path) -> MagicMock:
    """Settings stub pointing the global pool at the temp database."""
    mock_settings = MagicMock()
    mock_settings.storage.db_path = temp_db_path
    mock_settings.storage.pool_size = 3
    mock_settings.storage.busy_timeout = 10000
    return mock_settings


@pytest.fixture
async def ledger_db(
    temp_db_path: Path, storage_settings: MagicMock
) -> AsyncGenerator[Path, None]:
    """Migrated temp database wired into the global connection pool."""
    import printledger.infrastructure.storage.sqlite.connection as conn_module
    from printledger.infrastructure.storage.sqlite.migrations import initialize_database

    await initialize_database(temp_db_path)

    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=storage_settings):
        try:
            yield temp_db_path
        finally:
            await conn_module.close_pool()
