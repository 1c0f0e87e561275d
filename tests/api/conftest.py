"""Fixtures for API tests."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from printledger.api.main import app
from printledger.core.entities import InventoryMovement, MovementType


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def override():
    """Register a dependency override for the duration of a test."""

    def _override(dependency, value):
        app.dependency_overrides[dependency] = lambda: value
        return value

    return _override


@pytest.fixture
def api_settings() -> MagicMock:
    settings = MagicMock()
    settings.inventory.near_expiry_days = 30
    return settings


@pytest.fixture
def consumption_movement() -> InventoryMovement:
    return InventoryMovement(
        id=7,
        movement_number="MOV-00000007",
        type=MovementType.CONSUMPTION,
        material_id=1,
        batch_id=1,
        quantity=Decimal("-30"),
        unit_cost=Decimal("2.50"),
        total_cost=Decimal("75.00"),
        stock_after=Decimal("70"),
    )


@pytest.fixture
def mock_store() -> AsyncMock:
    return AsyncMock()
