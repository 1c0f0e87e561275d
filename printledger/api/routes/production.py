"""Production job and production costing endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from printledger.api.dependencies import (
    get_add_production_cost_use_case,
    get_create_job_use_case,
    get_delete_job_use_case,
    get_prod_store,
    get_production_totals_use_case,
    get_update_job_use_case,
)
from printledger.application.dto.mappers import cost_to_response, job_to_response, pagination
from printledger.application.dto.requests import (
    AddProductionCostRequest,
    CreateProductionJobRequest,
    UpdateProductionJobRequest,
)
from printledger.application.dto.responses import (
    AddProductionCostResponse,
    ErrorResponse,
    ProductionCostListResponse,
    ProductionJobListResponse,
    ProductionJobResponse,
    ProductionStatsResponse,
    ProductionTotalsResponse,
)
from printledger.application.use_cases import (
    AddProductionCostUseCase,
    ComputeProductionTotalsUseCase,
    CreateProductionJobUseCase,
    DeleteProductionJobUseCase,
    UpdateProductionJobUseCase,
)
from printledger.core.entities.production import JobStatus
from printledger.infrastructure.storage.sqlite import SQLiteProductionStore

router = APIRouter(prefix="/api/production", tags=["production"])


# Costs


@router.get("/costs", response_model=ProductionCostListResponse)
async def list_costs(
    job_id: int | None = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=500),
    store: SQLiteProductionStore = Depends(get_prod_store),
) -> ProductionCostListResponse:
    """List recorded production costs, newest first."""
    costs = await store.list_costs(job_id=job_id, limit=limit, offset=(page - 1) * limit)
    total = await store.count_costs(job_id=job_id)
    return ProductionCostListResponse(
        costs=[cost_to_response(c) for c in costs],
        pagination=pagination(page, limit, total),
    )


@router.post(
    "/costs",
    response_model=AddProductionCostResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def add_cost(
    request: AddProductionCostRequest,
    use_case: AddProductionCostUseCase = Depends(get_add_production_cost_use_case),
) -> AddProductionCostResponse:
    """Consume material for a job and freeze its unit cost."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get(
    "/costs/totals",
    response_model=ProductionTotalsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_totals(
    job_id: int,
    use_case: ComputeProductionTotalsUseCase = Depends(get_production_totals_use_case),
) -> ProductionTotalsResponse:
    """Material, labor and suggested price for a job."""
    breakdown = await use_case.execute(job_id)
    return use_case.to_response(breakdown)


# Jobs


@router.get("/jobs", response_model=ProductionJobListResponse)
async def list_jobs(
    job_status: JobStatus | None = Query(default=None, alias="status"),
    printer: str | None = None,
    limit: int = 100,
    offset: int = 0,
    store: SQLiteProductionStore = Depends(get_prod_store),
) -> ProductionJobListResponse:
    """List jobs, highest priority first."""
    jobs = await store.list_jobs(
        status=job_status, printer=printer, limit=limit, offset=offset
    )
    return ProductionJobListResponse(
        jobs=[job_to_response(j) for j in jobs],
        total=len(jobs),
    )


@router.post(
    "/jobs",
    response_model=ProductionJobResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_job(
    request: CreateProductionJobRequest,
    use_case: CreateProductionJobUseCase = Depends(get_create_job_use_case),
) -> ProductionJobResponse:
    """Queue a production job."""
    job = await use_case.execute(request)
    return use_case.to_response(job)


@router.get("/stats", response_model=ProductionStatsResponse)
async def get_stats(
    store: SQLiteProductionStore = Depends(get_prod_store),
) -> ProductionStatsResponse:
    """Production floor counters."""
    stats = await store.get_stats(datetime.now(UTC).date())
    return ProductionStatsResponse(**stats.model_dump())


@router.get(
    "/jobs/{job_id}",
    response_model=ProductionJobResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_job(
    job_id: int,
    store: SQLiteProductionStore = Depends(get_prod_store),
) -> ProductionJobResponse:
    """Get a production job."""
    job = await store.get_job(job_id)
    if job is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Production job not found: {job_id}",
        )
    return job_to_response(job)


@router.put(
    "/jobs/{job_id}",
    response_model=ProductionJobResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def update_job(
    job_id: int,
    request: UpdateProductionJobRequest,
    use_case: UpdateProductionJobUseCase = Depends(get_update_job_use_case),
) -> ProductionJobResponse:
    """Update job fields; a ``status`` field drives the job lifecycle."""
    job = await use_case.execute(job_id, request)
    return use_case.to_response(job)


@router.delete(
    "/jobs/{job_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_job(
    job_id: int,
    use_case: DeleteProductionJobUseCase = Depends(get_delete_job_use_case),
) -> None:
    """Delete a job and its cost rows. In-progress jobs cannot be deleted."""
    await use_case.execute(job_id)
