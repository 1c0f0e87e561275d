"""Tests for CreateMaterialUseCase and AdjustMaterialStockUseCase."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from printledger.application.dto.requests import AdjustMaterialRequest, CreateMaterialRequest
from printledger.application.use_cases.adjust_material_stock import AdjustMaterialStockUseCase
from printledger.application.use_cases.create_material import CreateMaterialUseCase
from printledger.core.entities import Material, MovementType
from printledger.core.exceptions import InvalidArgumentError


@pytest.fixture
def stores():
    material_store = AsyncMock()
    batch_store = AsyncMock()
    movement_store = AsyncMock()
    materials: dict[int, Material] = {}

    def create_material(material):
        material.id = 1
        material.stock = Decimal("0")
        materials[1] = material
        return material

    def adjust_stock(material_id, delta):
        materials[material_id].stock += delta
        return materials[material_id].stock

    def add_movement(movement):
        movement.id = 1
        movement.movement_number = "MOV-00000001"
        return movement

    material_store.create_material.side_effect = create_material
    material_store.get_material.side_effect = lambda material_id: materials.get(material_id)
    material_store.adjust_stock.side_effect = adjust_stock
    movement_store.add_movement.side_effect = add_movement
    return material_store, batch_store, movement_store


class TestCreateMaterialUseCase:
    async def test_without_stock_writes_no_movement(self, stores, no_transaction):
        material_store, batch_store, movement_store = stores
        use_case = CreateMaterialUseCase(
            material_store, batch_store, movement_store, transaction=no_transaction
        )

        result = await use_case.execute(
            CreateMaterialRequest(name="PLA Red", type="PLA", unit="kg")
        )

        assert result.material.id == 1
        assert result.movement is None
        movement_store.add_movement.assert_not_called()

    async def test_initial_stock_booked_as_adjustment(self, stores, no_transaction):
        material_store, batch_store, movement_store = stores
        use_case = CreateMaterialUseCase(
            material_store, batch_store, movement_store, transaction=no_transaction
        )

        result = await use_case.execute(
            CreateMaterialRequest(
                name="PLA Red", type="PLA", unit="kg",
                stock=Decimal("12.5"), cost_per_unit=Decimal("2.00"),
            )
        )

        assert result.material.stock == Decimal("12.5")
        assert result.movement.type == MovementType.ADJUSTMENT
        assert result.movement.quantity == Decimal("12.5")
        assert result.movement.stock_after == Decimal("12.5")
        assert result.movement.total_cost == Decimal("25.00")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"stock": Decimal("-1")},
            {"min_stock": Decimal("-1")},
            {"cost_per_unit": Decimal("-0.01")},
            {"min_stock": Decimal("10"), "max_stock": Decimal("5")},
        ],
    )
    async def test_validation(self, stores, no_transaction, overrides):
        material_store, batch_store, movement_store = stores
        use_case = CreateMaterialUseCase(
            material_store, batch_store, movement_store, transaction=no_transaction
        )
        request = CreateMaterialRequest(name="PLA", type="PLA", unit="kg", **overrides)

        with pytest.raises(InvalidArgumentError):
            await use_case.execute(request)
        material_store.create_material.assert_not_called()

    async def test_to_response(self, stores, no_transaction):
        use_case = CreateMaterialUseCase(*stores, transaction=no_transaction)
        result = await use_case.execute(
            CreateMaterialRequest(
                name="PLA", type="PLA", unit="kg",
                stock=Decimal("3"), min_stock=Decimal("5"),
            )
        )
        response = use_case.to_response(result)
        assert response.material.stock_status == "low"
        assert response.movement is not None


class TestAdjustMaterialStockUseCase:
    async def test_signed_adjustment(self, stores, no_transaction):
        material_store, batch_store, movement_store = stores
        await material_store.create_material(Material(name="PLA", type="PLA", unit="kg"))
        await material_store.adjust_stock(1, Decimal("10"))

        use_case = AdjustMaterialStockUseCase(
            material_store, batch_store, movement_store, transaction=no_transaction
        )
        result = await use_case.execute(
            1, AdjustMaterialRequest(quantity=Decimal("-4"), reason="Spool damaged")
        )

        assert result.material.stock == Decimal("6")
        assert result.movement.reference == "Manual adjustment"
        assert result.movement.notes == "Spool damaged"

    async def test_clamps_at_zero(self, stores, no_transaction):
        material_store, batch_store, movement_store = stores
        await material_store.create_material(Material(name="PLA", type="PLA", unit="kg"))
        await material_store.adjust_stock(1, Decimal("3"))

        use_case = AdjustMaterialStockUseCase(
            material_store, batch_store, movement_store, transaction=no_transaction
        )
        result = await use_case.execute(1, AdjustMaterialRequest(quantity=Decimal("-10")))

        assert result.material.stock == Decimal("0")
        assert result.movement.quantity == Decimal("-3")
        response = use_case.to_response(result)
        assert response.material.stock_status == "critical"
