"""Integration tests: use cases against a real SQLite ledger."""

import asyncio
from decimal import Decimal

import pytest

from printledger.application.dto.requests import (
    AddProductionCostRequest,
    AdjustMaterialRequest,
    CreateBatchRequest,
    CreateMaterialRequest,
    CreateProductionJobRequest,
    RecordMovementRequest,
    UpdateProductionJobRequest,
)
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
from printledger.core.entities import JobStatus, MovementType, Product
from printledger.core.exceptions import (
    InsufficientQuantityError,
    InsufficientStockError,
)
from printledger.infrastructure.storage.sqlite import (
    get_batch_store,
    get_material_store,
    get_movement_store,
    get_product_store,
    get_production_store,
)


async def _create_material(stock: str = "0", cost: str = "2.50") -> int:
    result = await CreateMaterialUseCase().execute(
        CreateMaterialRequest(
            name="PLA Black 1.75mm",
            type="PLA",
            unit="kg",
            stock=Decimal(stock),
            min_stock=Decimal("10"),
            cost_per_unit=Decimal(cost),
        )
    )
    return result.material.id


async def _receive(material_id: int, qty: str, unit_cost: str) -> int:
    result = await ReceiveBatchUseCase().execute(
        CreateBatchRequest(
            material_id=material_id,
            original_qty=Decimal(qty),
            unit_cost=Decimal(unit_cost),
        )
    )
    return result.batch.id


async def _consume(material_id: int, qty: str, movement_type=MovementType.CONSUMPTION):
    return await RecordMovementUseCase().execute(
        RecordMovementRequest(type=movement_type, material_id=material_id, quantity=Decimal(qty))
    )


async def _ledger_sum(material_id: int) -> Decimal:
    movements = await (await get_movement_store()).list_movements(
        material_id=material_id, limit=1000
    )
    return sum((m.stock_delta for m in movements), Decimal("0"))


class TestStockConservation:
    """Material stock always equals the sum of its movement deltas."""

    async def test_mixed_movements_conserve_stock(self, ledger_db):
        material_id = await _create_material(stock="10")
        await _receive(material_id, "100", "2.50")
        await _consume(material_id, "30")
        await _consume(material_id, "5", MovementType.WASTE)
        await _consume(material_id, "2", MovementType.RETURN)
        await _consume(material_id, "3", MovementType.TRANSFER)
        await AdjustMaterialStockUseCase().execute(
            material_id, AdjustMaterialRequest(quantity=Decimal("-4"), reason="Recount")
        )

        material = await (await get_material_store()).get_material(material_id)
        assert material.stock == Decimal("73")
        assert await _ledger_sum(material_id) == material.stock

    async def test_stock_after_matches_running_total(self, ledger_db):
        material_id = await _create_material()
        await _receive(material_id, "50", "2.00")
        await _consume(material_id, "20")

        movements = await (await get_movement_store()).list_movements(material_id=material_id)
        assert [m.stock_after for m in movements] == [Decimal("30"), Decimal("50")]


class TestReceiveAndConsume:
    async def test_receive_then_consume_from_batch(self, ledger_db):
        """Receiving 100 @ 2.50 then consuming 30 costs 75.00 and leaves 70."""
        material_id = await _create_material()
        batch_id = await _receive(material_id, "100", "2.50")

        batch = await (await get_batch_store()).get_batch(batch_id)
        assert batch.batch_number == "BATCH-000001"
        assert batch.total_cost == Decimal("250.00")

        result = await _consume(material_id, "30")
        assert result.movement.batch_id == batch_id
        assert result.movement.quantity == Decimal("-30")
        assert result.movement.unit_cost == Decimal("2.50")
        assert result.movement.total_cost == Decimal("75.00")
        assert result.movement.stock_after == Decimal("70")

        batch = await (await get_batch_store()).get_batch(batch_id)
        assert batch.current_qty == Decimal("70")
        assert batch.usage_percentage == Decimal("30.00")

    async def test_fifo_uses_oldest_batch(self, ledger_db):
        material_id = await _create_material()
        first = await _receive(material_id, "10", "2.00")
        await _receive(material_id, "10", "3.00")

        result = await _consume(material_id, "4")
        assert result.movement.batch_id == first
        assert result.movement.unit_cost == Decimal("2.00")

    async def test_consumption_without_batches_fails_and_rolls_back(self, ledger_db):
        material_id = await _create_material(stock="30")

        with pytest.raises(InsufficientStockError):
            await _consume(material_id, "40")

        material = await (await get_material_store()).get_material(material_id)
        assert material.stock == Decimal("30")
        count = await (await get_movement_store()).count_movements(material_id=material_id)
        assert count == 1

    async def test_failed_movement_does_not_burn_number(self, ledger_db):
        material_id = await _create_material(stock="5")
        with pytest.raises(InsufficientStockError):
            await _consume(material_id, "6")

        result = await _consume(material_id, "1", MovementType.RETURN)
        assert result.movement.movement_number == "MOV-00000002"

    async def test_concurrent_consumptions_serialize(self, ledger_db):
        """Two 60-unit draws on a 100-unit batch: exactly one wins."""
        material_id = await _create_material()
        batch_id = await _receive(material_id, "100", "2.50")

        results = await asyncio.gather(
            _consume(material_id, "60"),
            _consume(material_id, "60"),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], InsufficientQuantityError)

        batch = await (await get_batch_store()).get_batch(batch_id)
        material = await (await get_material_store()).get_material(material_id)
        assert batch.current_qty == Decimal("40")
        assert material.stock == Decimal("40")
        assert await _ledger_sum(material_id) == Decimal("40")


class TestBatchPinnedAdjustment:
    """Stock and the pinned batch absorb the same applied delta."""

    async def _adjust(self, material_id: int, batch_id: int, qty: str):
        return await RecordMovementUseCase().execute(
            RecordMovementRequest(
                type=MovementType.ADJUSTMENT,
                material_id=material_id,
                batch_id=batch_id,
                quantity=Decimal(qty),
            )
        )

    async def test_increase_capped_at_batch_original(self, ledger_db):
        material_id = await _create_material()
        batch_id = await _receive(material_id, "10", "2.00")
        await _consume(material_id, "4")

        result = await self._adjust(material_id, batch_id, "10")

        assert result.movement.quantity == Decimal("4")
        assert result.movement.stock_after == Decimal("10")
        batch = await (await get_batch_store()).get_batch(batch_id)
        material = await (await get_material_store()).get_material(material_id)
        assert batch.current_qty == Decimal("10")
        assert material.stock == Decimal("10")
        assert await _ledger_sum(material_id) == material.stock

    async def test_decrease_capped_at_batch_remaining(self, ledger_db):
        material_id = await _create_material(stock="20")
        batch_id = await _receive(material_id, "10", "2.00")

        result = await self._adjust(material_id, batch_id, "-15")

        assert result.movement.quantity == Decimal("-10")
        assert result.movement.total_cost == Decimal("20.00")
        batch = await (await get_batch_store()).get_batch(batch_id)
        material = await (await get_material_store()).get_material(material_id)
        assert batch.current_qty == Decimal("0")
        assert material.stock == Decimal("20")
        assert await _ledger_sum(material_id) == material.stock


class TestProductionCosting:
    async def test_job_costing_end_to_end(self, ledger_db, inventory_settings):
        """20.00 of material plus 5h at 15.00 totals 95.00, priced at 133.00."""
        material_id = await _create_material()
        await _receive(material_id, "10", "2.00")
        job = await CreateProductionJobUseCase().execute(
            CreateProductionJobRequest(name="Desk organizer", estimated_hours=Decimal("5"))
        )

        added = await AddProductionCostUseCase().execute(
            AddProductionCostRequest(
                production_job_id=job.id,
                material_id=material_id,
                quantity=Decimal("10"),
            )
        )
        assert added.cost.total_cost == Decimal("20.00")
        assert added.movement.production_job_id == job.id
        assert added.movement.reference == f"Production {job.job_number}"

        breakdown = await ComputeProductionTotalsUseCase(
            settings=inventory_settings
        ).execute(job.id)

        assert breakdown.material_cost == Decimal("20.00")
        assert breakdown.labor_cost == Decimal("75.00")
        assert breakdown.total_cost == Decimal("95.00")
        assert breakdown.suggested_price == Decimal("133.00")
        assert breakdown.lines[0].material == "PLA Black 1.75mm"

    async def test_failed_cost_leaves_no_cost_row(self, ledger_db):
        material_id = await _create_material(stock="3")
        job = await CreateProductionJobUseCase().execute(
            CreateProductionJobRequest(name="Too big")
        )

        with pytest.raises(InsufficientStockError):
            await AddProductionCostUseCase().execute(
                AddProductionCostRequest(
                    production_job_id=job.id,
                    material_id=material_id,
                    quantity=Decimal("4"),
                )
            )

        store = await get_production_store()
        assert await store.count_costs(job_id=job.id) == 0

    async def test_completing_job_credits_product(self, ledger_db):
        product = await (await get_product_store()).create_product(Product(name="Phone stand"))
        job = await CreateProductionJobUseCase().execute(
            CreateProductionJobRequest(name="Phone stand", product_id=product.id)
        )

        update = UpdateProductionJobUseCase()
        await update.execute(job.id, UpdateProductionJobRequest(status=JobStatus.IN_PROGRESS))
        done = await update.execute(
            job.id,
            UpdateProductionJobRequest(
                status=JobStatus.COMPLETED, actual_hours=Decimal("1.5")
            ),
        )

        assert done.status == JobStatus.COMPLETED
        assert done.actual_hours == Decimal("1.5")
        product = await (await get_product_store()).get_product(product.id)
        assert product.stock == 1

    async def test_delete_job_keeps_movements(self, ledger_db):
        material_id = await _create_material()
        await _receive(material_id, "10", "2.00")
        job = await CreateProductionJobUseCase().execute(
            CreateProductionJobRequest(name="Scrapped run")
        )
        await AddProductionCostUseCase().execute(
            AddProductionCostRequest(
                production_job_id=job.id, material_id=material_id, quantity=Decimal("2")
            )
        )

        assert await DeleteProductionJobUseCase().execute(job.id) is True

        store = await get_production_store()
        assert await store.get_job(job.id) is None
        assert await store.count_costs(job_id=job.id) == 0
        consumptions = await (await get_movement_store()).list_movements(
            material_id=material_id, movement_type=MovementType.CONSUMPTION
        )
        assert len(consumptions) == 1
        assert consumptions[0].production_job_id == job.id
