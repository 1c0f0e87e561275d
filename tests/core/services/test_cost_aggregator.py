"""Tests for production cost aggregation."""

from decimal import Decimal

from printledger.core.entities import ProductionCost, ProductionJob
from printledger.core.services.cost_aggregator import compute_breakdown, material_cost

RATE = Decimal("15.00")
MARGIN = Decimal("0.40")


def _cost(qty: str, unit_cost: str, material_id: int = 1) -> ProductionCost:
    quantity = Decimal(qty)
    unit = Decimal(unit_cost)
    return ProductionCost(
        production_job_id=1,
        material_id=material_id,
        quantity=quantity,
        unit_cost=unit,
        total_cost=quantity * unit,
        material_name="PLA Black",
        material_unit="kg",
    )


class TestComputeBreakdown:
    def test_materials_plus_labor(self):
        job = ProductionJob(id=1, name="Stand", actual_hours=Decimal("5"))
        breakdown = compute_breakdown(job, [_cost("8", "2.50")], RATE, MARGIN)

        assert breakdown.material_cost == Decimal("20.00")
        assert breakdown.labor_hours == Decimal("5")
        assert breakdown.labor_cost == Decimal("75.00")
        assert breakdown.total_cost == Decimal("95.00")
        assert breakdown.suggested_price == Decimal("133.00")
        assert breakdown.margin_percent == Decimal("40.00")

    def test_estimate_used_without_actual_hours(self):
        job = ProductionJob(id=1, name="Stand", estimated_hours=Decimal("2"))
        breakdown = compute_breakdown(job, [], RATE, MARGIN)
        assert breakdown.labor_cost == Decimal("30.00")
        assert breakdown.material_cost == Decimal("0.00")

    def test_no_hours_no_costs(self):
        breakdown = compute_breakdown(ProductionJob(id=1, name="Stand"), [], RATE, MARGIN)
        assert breakdown.total_cost == Decimal("0.00")
        assert breakdown.suggested_price == Decimal("0.00")
        assert breakdown.lines == []

    def test_one_line_per_cost_row(self):
        job = ProductionJob(id=1, name="Stand")
        costs = [_cost("1", "2.00"), _cost("2", "3.00", material_id=2)]
        breakdown = compute_breakdown(job, costs, RATE, MARGIN)
        assert [line.material_id for line in breakdown.lines] == [1, 2]
        assert breakdown.lines[0].material == "PLA Black"
        assert breakdown.material_cost == Decimal("8.00")

    def test_fallback_material_label(self):
        cost = _cost("1", "1.00")
        cost.material_name = None
        breakdown = compute_breakdown(ProductionJob(id=1, name="Stand"), [cost], RATE, MARGIN)
        assert breakdown.lines[0].material == "Material 1"

    def test_is_idempotent(self):
        job = ProductionJob(id=1, name="Stand", actual_hours=Decimal("1.5"))
        costs = [_cost("3.333", "1.10")]
        first = compute_breakdown(job, costs, RATE, MARGIN)
        second = compute_breakdown(job, costs, RATE, MARGIN)
        assert first == second


class TestMaterialCost:
    def test_sum(self):
        assert material_cost([_cost("1", "1.25"), _cost("2", "1.25")]) == Decimal("3.75")

    def test_empty(self):
        assert material_cost([]) == Decimal("0")
