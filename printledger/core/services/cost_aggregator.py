"""
Production cost aggregation.

Computes a job's cost breakdown on demand from its consumption rows and
labor hours. Nothing here is stored, so calling it twice without an
intervening write returns the same totals.
"""

from decimal import Decimal

from printledger.core.entities.production import (
    CostBreakdown,
    CostLine,
    ProductionCost,
    ProductionJob,
)
from printledger.core.services.money import quantize_money


def material_cost(costs: list[ProductionCost]) -> Decimal:
    return sum((c.total_cost for c in costs), Decimal("0"))


def compute_breakdown(
    job: ProductionJob,
    costs: list[ProductionCost],
    labor_rate_per_hour: Decimal,
    margin: Decimal,
) -> CostBreakdown:
    """
    Price a job.

    ``labor_cost = labor_hours * rate`` where labor hours are the actual
    hours if recorded, else the estimate, else zero. The suggested price
    applies ``margin`` as a fraction on top of total cost.
    """
    lines = [
        CostLine(
            material_id=c.material_id,
            material=c.material_name or f"Material {c.material_id}",
            unit=c.material_unit,
            quantity=c.quantity,
            unit_cost=c.unit_cost,
            total_cost=c.total_cost,
        )
        for c in costs
    ]

    materials = quantize_money(material_cost(costs))
    hours = job.labor_hours
    labor = quantize_money(hours * labor_rate_per_hour)
    total = materials + labor
    suggested = quantize_money(total * (1 + margin))

    return CostBreakdown(
        production_job_id=job.id,
        lines=lines,
        material_cost=materials,
        labor_hours=hours,
        labor_rate_per_hour=labor_rate_per_hour,
        labor_cost=labor,
        total_cost=total,
        margin=margin,
        suggested_price=suggested,
    )
