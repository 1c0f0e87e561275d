"""Production job use cases: create, update (incl. status changes), delete."""

from datetime import UTC, datetime
from decimal import Decimal

from printledger.application.dto.mappers import job_to_response
from printledger.application.dto.requests import (
    CreateProductionJobRequest,
    UpdateProductionJobRequest,
)
from printledger.application.dto.responses import ProductionJobResponse
from printledger.application.use_cases.record_movement import (
    TransactionFactory,
    default_transaction,
)
from printledger.config import get_logger
from printledger.core.entities.production import JobStatus, ProductionJob
from printledger.core.exceptions import (
    InvalidArgumentError,
    ProductionJobNotFoundError,
    ProductNotFoundError,
)
from printledger.core.interfaces.product_store import IProductStore
from printledger.core.interfaces.production_store import IProductionStore
from printledger.core.services.job_lifecycle import apply_transition, ensure_deletable

logger = get_logger(__name__)

# Finished units credited to the linked product when a job completes
UNITS_PER_COMPLETED_JOB = 1

_SCALAR_FIELDS = ("name", "description", "printer", "material", "settings", "notes")


def _check_priority(priority: int) -> None:
    if not 1 <= priority <= 10:
        raise InvalidArgumentError("priority", "must be between 1 and 10", priority)


def _check_hours(field: str, hours: Decimal | None) -> None:
    if hours is not None and hours < 0:
        raise InvalidArgumentError(field, "must be non-negative", hours)


class _ProductionUseCase:
    def __init__(
        self,
        production_store: IProductionStore | None = None,
        product_store: IProductStore | None = None,
        transaction: TransactionFactory | None = None,
    ):
        self._production_store = production_store
        self._product_store = product_store
        self._transaction = transaction

    async def _get_production_store(self) -> IProductionStore:
        if self._production_store is None:
            from printledger.infrastructure.storage.sqlite import get_production_store

            self._production_store = await get_production_store()
        return self._production_store

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from printledger.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    def _get_transaction(self) -> TransactionFactory:
        return self._transaction or default_transaction()

    def to_response(self, job: ProductionJob) -> ProductionJobResponse:
        """Convert job to API response."""
        return job_to_response(job)


class CreateProductionJobUseCase(_ProductionUseCase):
    """Queue a new production job."""

    async def execute(self, request: CreateProductionJobRequest) -> ProductionJob:
        logger.info("create_job_started", name=request.name, product_id=request.product_id)
        if not request.name.strip():
            raise InvalidArgumentError("name", "is required", request.name)
        _check_priority(request.priority)
        _check_hours("estimated_hours", request.estimated_hours)

        async with self._get_transaction()():
            if request.product_id is not None:
                products = await self._get_product_store()
                if await products.get_product(request.product_id) is None:
                    raise ProductNotFoundError(request.product_id)

            store = await self._get_production_store()
            job = await store.create_job(
                ProductionJob(
                    name=request.name,
                    description=request.description,
                    priority=request.priority,
                    estimated_hours=request.estimated_hours,
                    printer=request.printer,
                    material=request.material,
                    settings=request.settings,
                    files=request.files,
                    notes=request.notes,
                    order_id=request.order_id,
                    product_id=request.product_id,
                )
            )

        logger.info("create_job_complete", job_id=job.id, job_number=job.job_number)
        return job


class UpdateProductionJobUseCase(_ProductionUseCase):
    """
    Apply a partial update and, when ``status`` is present, a state transition.

    Completing a job linked to a product credits one finished unit to that
    product in the same transaction.
    """

    async def execute(
        self, job_id: int, request: UpdateProductionJobRequest
    ) -> ProductionJob:
        fields = request.model_fields_set
        logger.info("update_job_started", job_id=job_id, fields=sorted(fields))

        if "priority" in fields and request.priority is not None:
            _check_priority(request.priority)
        _check_hours("estimated_hours", request.estimated_hours)
        _check_hours("actual_hours", request.actual_hours)

        async with self._get_transaction()():
            store = await self._get_production_store()
            job = await store.get_job(job_id)
            if job is None:
                raise ProductionJobNotFoundError(job_id)

            for field in _SCALAR_FIELDS:
                if field in fields:
                    value = getattr(request, field)
                    if field == "name" and not value:
                        raise InvalidArgumentError("name", "is required", value)
                    if field == "settings" and value is None:
                        value = {}
                    setattr(job, field, value)
            if "priority" in fields and request.priority is not None:
                job.priority = request.priority
            if "estimated_hours" in fields:
                job.estimated_hours = request.estimated_hours
            if "actual_hours" in fields:
                job.actual_hours = request.actual_hours

            changed = False
            if "status" in fields and request.status is not None:
                changed = apply_transition(
                    job,
                    request.status,
                    now=datetime.now(UTC),
                    actual_hours=request.actual_hours,
                )

            job = await store.update_job(job)

            if changed and job.status == JobStatus.COMPLETED and job.product_id is not None:
                products = await self._get_product_store()
                await products.increment_stock(job.product_id, UNITS_PER_COMPLETED_JOB)

        logger.info(
            "update_job_complete",
            job_id=job_id,
            status=job.status.value,
            status_changed=changed,
        )
        return job


class DeleteProductionJobUseCase(_ProductionUseCase):
    """Delete a job and its cost rows; refused while the job is in progress."""

    async def execute(self, job_id: int) -> bool:
        async with self._get_transaction()():
            store = await self._get_production_store()
            job = await store.get_job(job_id)
            if job is None:
                raise ProductionJobNotFoundError(job_id)
            ensure_deletable(job)
            deleted = await store.delete_job(job_id)

        logger.info("delete_job_complete", job_id=job_id, deleted=deleted)
        return deleted
