"""Material batch (purchase lot) endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from printledger.api.dependencies import (
    get_app_settings,
    get_lot_store,
    get_mat_store,
    get_receive_batch_use_case,
)
from printledger.application.dto.mappers import batch_to_response
from printledger.application.dto.requests import CreateBatchRequest
from printledger.application.dto.responses import (
    BatchListResponse,
    BatchResponse,
    CreateBatchResponse,
    ErrorResponse,
)
from printledger.application.use_cases import ReceiveBatchUseCase
from printledger.config import Settings
from printledger.core.entities.batch import BatchStatus
from printledger.core.services.stock_classifier import classify_batch
from printledger.infrastructure.storage.sqlite import SQLiteBatchStore, SQLiteMaterialStore


router = APIRouter(prefix="/api/inventory/batches", tags=["batches"])


@router.get("", response_model=BatchListResponse)
async def list_batches(
    material_id: int | None = None,
    batch_status: BatchStatus | None = Query(default=None, alias="status"),
    include_inactive: bool = True,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: SQLiteBatchStore = Depends(get_lot_store),
    materials: SQLiteMaterialStore = Depends(get_mat_store),
    settings: Settings = Depends(get_app_settings),
) -> BatchListResponse:
    """
    List batches, active first, newest purchase first.

    Batch status is derived from quantity, activity and expiry, so a status
    filter classifies every candidate before the page is cut.
    """
    today = datetime.now(UTC).date()
    near_expiry_days = settings.inventory.near_expiry_days
    if batch_status is None:
        batches = await store.list_batches(
            material_id=material_id,
            include_inactive=include_inactive,
            limit=limit,
            offset=offset,
        )
        total = await store.count_batches(
            material_id=material_id, include_inactive=include_inactive
        )
    else:
        candidates = await store.list_batches(
            material_id=material_id, include_inactive=include_inactive, limit=None
        )
        matches = [
            b for b in candidates if classify_batch(b, today, near_expiry_days) == batch_status
        ]
        batches = matches[offset : offset + limit]
        total = len(matches)

    cache: dict = {}
    items = []
    for batch in batches:
        if batch.material_id not in cache:
            cache[batch.material_id] = await materials.get_material(batch.material_id)
        items.append(
            batch_to_response(batch, today, near_expiry_days, cache[batch.material_id])
        )
    return BatchListResponse(batches=items, total=total)


@router.post(
    "",
    response_model=CreateBatchResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def create_batch(
    request: CreateBatchRequest,
    use_case: ReceiveBatchUseCase = Depends(get_receive_batch_use_case),
) -> CreateBatchResponse:
    """Receive a purchase lot and book its PURCHASE movement."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get(
    "/{batch_id}",
    response_model=BatchResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_batch(
    batch_id: int,
    store: SQLiteBatchStore = Depends(get_lot_store),
    materials: SQLiteMaterialStore = Depends(get_mat_store),
    settings: Settings = Depends(get_app_settings),
) -> BatchResponse:
    """Get a batch with derived status and usage."""
    batch = await store.get_batch(batch_id)
    if batch is None:
        raise HTTPException(status_code=404, detail=f"Batch not found: {batch_id}")
    material = await materials.get_material(batch.material_id)
    return batch_to_response(
        batch,
        datetime.now(UTC).date(),
        settings.inventory.near_expiry_days,
        material,
    )


@router.post(
    "/{batch_id}/deactivate",
    response_model=BatchResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def deactivate_batch(
    batch_id: int,
    store: SQLiteBatchStore = Depends(get_lot_store),
    settings: Settings = Depends(get_app_settings),
) -> BatchResponse:
    """Withdraw a batch from FIFO selection. Stock figures are untouched."""
    batch = await store.deactivate_batch(batch_id)
    return batch_to_response(
        batch, datetime.now(UTC).date(), settings.inventory.near_expiry_days
    )
