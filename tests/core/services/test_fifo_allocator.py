"""Tests for FIFO batch allocation."""

from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from printledger.core.entities import Material, MaterialBatch
from printledger.core.exceptions import (
    BatchNotFoundError,
    InsufficientQuantityError,
    InvalidArgumentError,
)
from printledger.core.services.fifo_allocator import FifoAllocator, select_fifo_batch


def _batch(batch_id: int, purchased: date, qty: str, cost: str = "2.00", **kw) -> MaterialBatch:
    return MaterialBatch(
        id=batch_id,
        material_id=kw.pop("material_id", 1),
        purchase_date=purchased,
        original_qty=Decimal("100"),
        current_qty=Decimal(qty),
        unit_cost=Decimal(cost),
        **kw,
    )


@pytest.fixture
def material() -> Material:
    return Material(
        id=1, name="PLA", type="PLA", unit="kg",
        stock=Decimal("150"), cost_per_unit=Decimal("2.20"),
    )


@pytest.fixture
def batch_store():
    return AsyncMock()


class TestSelectFifoBatch:
    def test_oldest_purchase_wins(self):
        newer = _batch(1, date(2024, 2, 1), "50")
        older = _batch(2, date(2024, 1, 1), "50")
        assert select_fifo_batch([newer, older], Decimal("10")) is older

    def test_same_day_ordered_by_id(self):
        second = _batch(5, date(2024, 1, 1), "50")
        first = _batch(4, date(2024, 1, 1), "50")
        assert select_fifo_batch([second, first], Decimal("10")) is first

    def test_skips_depleted_and_inactive(self):
        depleted = _batch(1, date(2023, 1, 1), "0")
        inactive = _batch(2, date(2023, 6, 1), "50", is_active=False)
        live = _batch(3, date(2024, 1, 1), "50")
        assert select_fifo_batch([depleted, inactive, live], Decimal("10")) is live

    def test_no_eligible_batch(self):
        assert select_fifo_batch([_batch(1, date(2024, 1, 1), "0")], Decimal("1")) is None

    def test_oldest_short_raises_without_splitting(self):
        older = _batch(1, date(2024, 1, 1), "40")
        newer = _batch(2, date(2024, 2, 1), "100")
        with pytest.raises(InsufficientQuantityError) as exc_info:
            select_fifo_batch([older, newer], Decimal("60"))
        assert exc_info.value.details["batch_id"] == 1


class TestFifoAllocator:
    async def test_allocates_oldest_batch(self, material, batch_store):
        older = _batch(1, date(2024, 1, 1), "50", cost="2.00")
        newer = _batch(2, date(2024, 2, 1), "50", cost="3.00")
        batch_store.list_available.return_value = [newer, older]

        allocation = await FifoAllocator(batch_store).allocate(material, Decimal("20"))

        assert allocation.batch_id == 1
        assert allocation.unit_cost == Decimal("2.00")
        batch_store.list_available.assert_awaited_once_with(1)

    async def test_without_batches_uses_material_cost(self, material, batch_store):
        batch_store.list_available.return_value = []

        allocation = await FifoAllocator(batch_store).allocate(material, Decimal("20"))

        assert allocation.batch is None
        assert allocation.batch_id is None
        assert allocation.unit_cost == Decimal("2.20")

    async def test_pinned_batch(self, material, batch_store):
        pinned = _batch(9, date(2024, 5, 1), "50", cost="4.00")
        batch_store.get_batch.return_value = pinned

        allocation = await FifoAllocator(batch_store).allocate(
            material, Decimal("20"), batch_id=9
        )

        assert allocation.batch is pinned
        assert allocation.unit_cost == Decimal("4.00")
        batch_store.list_available.assert_not_called()

    async def test_pinned_batch_missing(self, material, batch_store):
        batch_store.get_batch.return_value = None
        with pytest.raises(BatchNotFoundError):
            await FifoAllocator(batch_store).allocate(material, Decimal("1"), batch_id=9)

    async def test_pinned_batch_of_other_material(self, material, batch_store):
        batch_store.get_batch.return_value = _batch(9, date(2024, 5, 1), "50", material_id=2)
        with pytest.raises(InvalidArgumentError):
            await FifoAllocator(batch_store).allocate(material, Decimal("1"), batch_id=9)

    async def test_pinned_batch_inactive(self, material, batch_store):
        batch_store.get_batch.return_value = _batch(
            9, date(2024, 5, 1), "50", is_active=False
        )
        with pytest.raises(InvalidArgumentError):
            await FifoAllocator(batch_store).allocate(material, Decimal("1"), batch_id=9)

    async def test_pinned_batch_short(self, material, batch_store):
        batch_store.get_batch.return_value = _batch(9, date(2024, 5, 1), "5")
        with pytest.raises(InsufficientQuantityError):
            await FifoAllocator(batch_store).allocate(material, Decimal("6"), batch_id=9)

    async def test_resolve_batch_checks_owner(self, material, batch_store):
        batch_store.get_batch.return_value = _batch(9, date(2024, 5, 1), "50", material_id=3)
        with pytest.raises(InvalidArgumentError):
            await FifoAllocator(batch_store).resolve_batch(material, 9)
