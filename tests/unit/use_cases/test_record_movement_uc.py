"""Tests for RecordMovementUseCase."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from printledger.application.dto.requests import RecordMovementRequest
from printledger.application.use_cases.record_movement import RecordMovementUseCase
from printledger.core.entities import MaterialBatch, MovementType
from printledger.core.exceptions import (
    InsufficientQuantityError,
    InsufficientStockError,
    InvalidArgumentError,
    MaterialNotFoundError,
)


def _echo_movement(movement):
    movement.id = 1
    movement.movement_number = "MOV-00000001"
    return movement


@pytest.fixture
def stores(sample_material):
    material_store = AsyncMock()
    batch_store = AsyncMock()
    movement_store = AsyncMock()

    material_store.get_material.return_value = sample_material
    material_store.adjust_stock.side_effect = (
        lambda material_id, delta: sample_material.stock + delta
    )
    batch_store.list_available.return_value = []
    movement_store.add_movement.side_effect = _echo_movement
    return material_store, batch_store, movement_store


@pytest.fixture
def use_case(stores, no_transaction):
    material_store, batch_store, movement_store = stores
    return RecordMovementUseCase(
        material_store=material_store,
        batch_store=batch_store,
        movement_store=movement_store,
        transaction=no_transaction,
    )


def _request(movement_type: MovementType, qty: str, **kw) -> RecordMovementRequest:
    return RecordMovementRequest(
        type=movement_type, material_id=1, quantity=Decimal(qty), **kw
    )


class TestRecordMovementUseCase:
    async def test_purchase_raises_stock(self, use_case, stores):
        material_store, _, _ = stores
        result = await use_case.execute(_request(MovementType.PURCHASE, "20"))

        material_store.adjust_stock.assert_awaited_once_with(1, Decimal("20"))
        assert result.movement.quantity == Decimal("20")
        assert result.movement.stock_after == Decimal("120")
        assert result.material.stock == Decimal("120")

    async def test_consumption_from_fifo_batch(self, use_case, stores, sample_batch):
        _, batch_store, _ = stores
        batch_store.list_available.return_value = [sample_batch]
        drained = sample_batch.model_copy(update={"current_qty": Decimal("70")})
        batch_store.decrement_batch.return_value = drained

        result = await use_case.execute(_request(MovementType.CONSUMPTION, "30"))

        batch_store.decrement_batch.assert_awaited_once_with(1, Decimal("30"))
        assert result.movement.quantity == Decimal("-30")
        assert result.movement.batch_id == 1
        assert result.movement.unit_cost == Decimal("2.50")
        assert result.movement.total_cost == Decimal("75.00")
        assert result.batch.current_qty == Decimal("70")

    async def test_consumption_without_batches_uses_average_cost(self, use_case, stores):
        _, batch_store, _ = stores
        result = await use_case.execute(_request(MovementType.CONSUMPTION, "10"))

        batch_store.decrement_batch.assert_not_called()
        assert result.movement.batch_id is None
        assert result.movement.unit_cost == Decimal("2.50")

    async def test_consumption_beyond_stock(self, use_case, stores, sample_material):
        material_store, _, movement_store = stores
        sample_material.stock = Decimal("30")

        with pytest.raises(InsufficientStockError):
            await use_case.execute(_request(MovementType.CONSUMPTION, "40"))

        material_store.adjust_stock.assert_not_called()
        movement_store.add_movement.assert_not_called()

    async def test_short_batch_reported_before_stock_check(self, use_case, stores):
        _, batch_store, movement_store = stores
        batch_store.list_available.return_value = [
            MaterialBatch(
                id=2,
                material_id=1,
                purchase_date=date(2024, 1, 1),
                original_qty=Decimal("100"),
                current_qty=Decimal("40"),
                unit_cost=Decimal("2.50"),
            )
        ]

        with pytest.raises(InsufficientQuantityError):
            await use_case.execute(_request(MovementType.CONSUMPTION, "60"))
        movement_store.add_movement.assert_not_called()

    async def test_negative_adjustment_is_clamped(self, use_case, stores, sample_material):
        material_store, _, _ = stores
        sample_material.stock = Decimal("20")

        result = await use_case.execute(_request(MovementType.ADJUSTMENT, "-50"))

        material_store.adjust_stock.assert_awaited_once_with(1, Decimal("-20"))
        assert result.movement.quantity == Decimal("-20")
        assert result.movement.stock_after == Decimal("0")

    async def test_transfer_leaves_stock_alone(self, use_case, stores):
        material_store, _, _ = stores
        result = await use_case.execute(_request(MovementType.TRANSFER, "5"))

        material_store.adjust_stock.assert_not_called()
        assert result.movement.quantity == Decimal("5")
        assert result.movement.stock_after == Decimal("100")

    async def test_adjustment_with_batch_moves_batch(self, use_case, stores, sample_batch):
        _, batch_store, _ = stores
        batch_store.get_batch.return_value = sample_batch
        batch_store.adjust_batch.return_value = sample_batch

        await use_case.execute(_request(MovementType.ADJUSTMENT, "-5", batch_id=1))

        batch_store.adjust_batch.assert_awaited_once_with(1, Decimal("-5"))

    async def test_zero_quantity_rejected(self, use_case, stores):
        material_store, _, _ = stores
        with pytest.raises(InvalidArgumentError):
            await use_case.execute(_request(MovementType.PURCHASE, "0"))
        material_store.get_material.assert_not_called()

    async def test_unknown_material(self, use_case, stores):
        material_store, _, _ = stores
        material_store.get_material.return_value = None
        with pytest.raises(MaterialNotFoundError):
            await use_case.execute(_request(MovementType.PURCHASE, "1"))

    async def test_to_response(self, use_case):
        result = await use_case.execute(_request(MovementType.RETURN, "2"))
        response = use_case.to_response(result)
        assert response.type == "RETURN"
        assert response.impact == "positive"
        assert response.movement_number == "MOV-00000001"
