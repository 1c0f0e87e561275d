"""Abstract interface for production jobs and their cost records."""

from abc import ABC, abstractmethod
from datetime import date

from printledger.core.entities.production import (
    JobStatus,
    ProductionCost,
    ProductionJob,
    ProductionStats,
)


class IProductionStore(ABC):
    """Abstract interface for production persistence."""

    # Jobs

    @abstractmethod
    async def create_job(self, job: ProductionJob) -> ProductionJob:
        """Insert a job and assign its sequential job number."""

    @abstractmethod
    async def get_job(self, job_id: int) -> ProductionJob | None:
        """Get job by ID."""

    @abstractmethod
    async def list_jobs(
        self,
        status: JobStatus | None = None,
        printer: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[ProductionJob]:
        """List jobs, highest priority then newest first."""

    @abstractmethod
    async def update_job(self, job: ProductionJob) -> ProductionJob:
        """Persist a job's mutable fields."""

    @abstractmethod
    async def delete_job(self, job_id: int) -> bool:
        """Delete a job and its cost records."""

    @abstractmethod
    async def get_stats(self, today: date) -> ProductionStats:
        """Dashboard counters."""

    # Costs

    @abstractmethod
    async def add_cost(self, cost: ProductionCost) -> ProductionCost:
        """Record material consumed by a job."""

    @abstractmethod
    async def get_costs_for_job(self, job_id: int) -> list[ProductionCost]:
        """All cost rows of a job in creation order, with material names."""

    @abstractmethod
    async def list_costs(
        self,
        job_id: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ProductionCost]:
        """List cost rows, newest first."""

    @abstractmethod
    async def count_costs(self, job_id: int | None = None) -> int:
        """Count cost rows."""
