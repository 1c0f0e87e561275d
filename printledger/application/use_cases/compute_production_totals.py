"""Compute Production Totals Use Case: on-demand job costing."""

from printledger.application.dto.responses import (
    CostBreakdownBlock,
    CostLineResponse,
    CostTotalsBlock,
    LaborCostBlock,
    MaterialCostBlock,
    ProductionTotalsResponse,
)
from printledger.config import InventorySettings, get_logger, get_settings
from printledger.core.entities.production import CostBreakdown
from printledger.core.exceptions import ProductionJobNotFoundError
from printledger.core.interfaces.production_store import IProductionStore
from printledger.core.services.cost_aggregator import compute_breakdown

logger = get_logger(__name__)


class ComputeProductionTotalsUseCase:
    """Read-only: never writes and never takes the write lock."""

    def __init__(
        self,
        production_store: IProductionStore | None = None,
        settings: InventorySettings | None = None,
    ):
        self._production_store = production_store
        self._settings = settings

    async def _get_production_store(self) -> IProductionStore:
        if self._production_store is None:
            from printledger.infrastructure.storage.sqlite import get_production_store

            self._production_store = await get_production_store()
        return self._production_store

    def _get_settings(self) -> InventorySettings:
        if self._settings is None:
            self._settings = get_settings().inventory
        return self._settings

    async def execute(self, job_id: int) -> CostBreakdown:
        """Execute compute totals use case."""
        store = await self._get_production_store()
        job = await store.get_job(job_id)
        if job is None:
            raise ProductionJobNotFoundError(job_id)

        costs = await store.get_costs_for_job(job_id)
        settings = self._get_settings()
        breakdown = compute_breakdown(
            job,
            costs,
            labor_rate_per_hour=settings.labor_rate_per_hour,
            margin=settings.margin,
        )
        logger.info(
            "production_totals_computed",
            job_id=job_id,
            cost_rows=len(costs),
            total_cost=breakdown.total_cost,
            suggested_price=breakdown.suggested_price,
        )
        return breakdown

    def to_response(self, breakdown: CostBreakdown) -> ProductionTotalsResponse:
        """Convert breakdown to API response."""
        return ProductionTotalsResponse(
            production_job_id=breakdown.production_job_id,
            currency=self._get_settings().currency,
            breakdown=CostBreakdownBlock(
                materials=MaterialCostBlock(
                    cost=breakdown.material_cost,
                    items=[
                        CostLineResponse(**line.model_dump()) for line in breakdown.lines
                    ],
                ),
                labor=LaborCostBlock(
                    hours=breakdown.labor_hours,
                    cost_per_hour=breakdown.labor_rate_per_hour,
                    total_cost=breakdown.labor_cost,
                ),
            ),
            totals=CostTotalsBlock(
                material_cost=breakdown.material_cost,
                labor_cost=breakdown.labor_cost,
                total_cost=breakdown.total_cost,
                suggested_price=breakdown.suggested_price,
                margin=breakdown.margin_percent,
            ),
        )
