"""Tests for ReceiveBatchUseCase."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from printledger.application.dto.requests import CreateBatchRequest
from printledger.application.use_cases.receive_batch import ReceiveBatchUseCase
from printledger.core.entities import MovementType
from printledger.core.exceptions import InvalidArgumentError, MaterialNotFoundError


@pytest.fixture
def stores(sample_material):
    material_store = AsyncMock()
    batch_store = AsyncMock()
    movement_store = AsyncMock()

    def add_movement(movement):
        movement.id = 1
        movement.movement_number = "MOV-00000001"
        return movement

    def create_batch(batch):
        batch.id = 5
        batch.batch_number = "BATCH-000005"
        batch_store.get_batch.return_value = batch
        return batch

    sample_material.stock = Decimal("0")
    material_store.get_material.return_value = sample_material
    material_store.adjust_stock.side_effect = lambda material_id, delta: delta
    batch_store.create_batch.side_effect = create_batch
    movement_store.add_movement.side_effect = add_movement
    return material_store, batch_store, movement_store


@pytest.fixture
def use_case(stores, no_transaction, inventory_settings):
    material_store, batch_store, movement_store = stores
    return ReceiveBatchUseCase(
        material_store=material_store,
        batch_store=batch_store,
        movement_store=movement_store,
        transaction=no_transaction,
        settings=inventory_settings,
    )


def _request(**overrides) -> CreateBatchRequest:
    data = {
        "material_id": 1,
        "purchase_date": date(2024, 6, 1),
        "original_qty": Decimal("100"),
        "unit_cost": Decimal("2.50"),
        "expiry_date": date(2024, 6, 21),
        "invoice_number": "F001-123",
    }
    data.update(overrides)
    return CreateBatchRequest(**data)


class TestReceiveBatchUseCase:
    async def test_creates_full_batch_and_purchase(self, use_case, stores):
        material_store, batch_store, movement_store = stores

        result = await use_case.execute(_request())

        created = batch_store.create_batch.call_args[0][0]
        assert created.current_qty == created.original_qty == Decimal("100")
        material_store.adjust_stock.assert_awaited_once_with(1, Decimal("100"))

        movement = movement_store.add_movement.call_args[0][0]
        assert movement.type == MovementType.PURCHASE
        assert movement.batch_id == 5
        assert movement.quantity == Decimal("100")
        assert movement.total_cost == Decimal("250.00")
        assert movement.reference == "F001-123"
        assert result.batch.batch_number == "BATCH-000005"

    async def test_reference_defaults_to_batch_number(self, use_case, stores):
        _, _, movement_store = stores
        await use_case.execute(_request(invoice_number=None))
        movement = movement_store.add_movement.call_args[0][0]
        assert movement.reference == "Batch BATCH-000005"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"original_qty": Decimal("0")},
            {"unit_cost": Decimal("-1")},
            {"expiry_date": date(2024, 5, 31)},
        ],
    )
    async def test_validation(self, use_case, stores, overrides):
        _, batch_store, _ = stores
        with pytest.raises(InvalidArgumentError):
            await use_case.execute(_request(**overrides))
        batch_store.create_batch.assert_not_called()

    async def test_unknown_material(self, use_case, stores):
        material_store, batch_store, _ = stores
        material_store.get_material.return_value = None
        with pytest.raises(MaterialNotFoundError):
            await use_case.execute(_request())
        batch_store.create_batch.assert_not_called()

    async def test_to_response(self, use_case):
        result = await use_case.execute(_request())
        response = use_case.to_response(result)
        assert response.batch.material_name == "PLA Black 1.75mm"
        assert response.batch.total_cost == Decimal("250.00")
        assert response.movement.type == "PURCHASE"
