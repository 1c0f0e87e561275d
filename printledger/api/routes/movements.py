"""Inventory movement ledger endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from printledger.api.dependencies import get_mov_store, get_record_movement_use_case
from printledger.application.dto.mappers import movement_to_response, pagination
from printledger.application.dto.requests import RecordMovementRequest
from printledger.application.dto.responses import (
    ErrorResponse,
    MovementListResponse,
    MovementResponse,
)
from printledger.application.use_cases import RecordMovementUseCase
from printledger.core.entities.movement import MovementType
from printledger.infrastructure.storage.sqlite import SQLiteMovementStore

router = APIRouter(prefix="/api/inventory/movements", tags=["movements"])


@router.get("", response_model=MovementListResponse)
async def list_movements(
    material_id: int | None = None,
    movement_type: MovementType | None = Query(default=None, alias="type"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=500),
    store: SQLiteMovementStore = Depends(get_mov_store),
) -> MovementListResponse:
    """List movements, newest first, with page-based pagination."""
    movements = await store.list_movements(
        material_id=material_id,
        movement_type=movement_type,
        limit=limit,
        offset=(page - 1) * limit,
    )
    total = await store.count_movements(material_id=material_id, movement_type=movement_type)
    return MovementListResponse(
        movements=[movement_to_response(m) for m in movements],
        pagination=pagination(page, limit, total),
    )


@router.post(
    "",
    response_model=MovementResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def record_movement(
    request: RecordMovementRequest,
    use_case: RecordMovementUseCase = Depends(get_record_movement_use_case),
) -> MovementResponse:
    """Append a movement and apply its stock and batch effects atomically."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get(
    "/{movement_id}",
    response_model=MovementResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_movement(
    movement_id: int,
    store: SQLiteMovementStore = Depends(get_mov_store),
) -> MovementResponse:
    """Get a single movement."""
    movement = await store.get_movement(movement_id)
    if movement is None:
        raise HTTPException(status_code=404, detail=f"Movement not found: {movement_id}")
    return movement_to_response(movement)
