"""Material catalogue endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from printledger.api.dependencies import (
    get_adjust_material_use_case,
    get_create_material_use_case,
    get_mat_store,
)
from printledger.application.dto.mappers import material_to_response
from printledger.application.dto.requests import (
    AdjustMaterialRequest,
    CreateMaterialRequest,
)
from printledger.application.dto.responses import (
    AdjustMaterialResponse,
    CreateMaterialResponse,
    ErrorResponse,
    MaterialListResponse,
    MaterialResponse,
)
from printledger.application.use_cases import (
    AdjustMaterialStockUseCase,
    CreateMaterialUseCase,
)
from printledger.core.entities.material import StockStatus
from printledger.core.services.stock_classifier import classify_material
from printledger.infrastructure.storage.sqlite import SQLiteMaterialStore

router = APIRouter(prefix="/api/inventory/materials", tags=["materials"])


@router.get("", response_model=MaterialListResponse)
async def list_materials(
    material_type: str | None = Query(default=None, alias="type"),
    stock_status: StockStatus | None = Query(default=None, alias="status"),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: SQLiteMaterialStore = Depends(get_mat_store),
) -> MaterialListResponse:
    """
    List materials, optionally filtered by type and derived stock status.

    Stock status is not a column, so a status filter classifies every
    material of the type before the page is cut; ``total`` counts all matches.
    """
    if stock_status is None:
        materials = await store.list_materials(
            material_type=material_type, limit=limit, offset=offset
        )
        total = await store.count_materials(material_type=material_type)
    else:
        candidates = await store.list_materials(material_type=material_type, limit=None)
        matches = [m for m in candidates if classify_material(m) == stock_status]
        materials = matches[offset : offset + limit]
        total = len(matches)
    return MaterialListResponse(
        materials=[material_to_response(m) for m in materials],
        total=total,
    )


@router.post(
    "",
    response_model=CreateMaterialResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_material(
    request: CreateMaterialRequest,
    use_case: CreateMaterialUseCase = Depends(get_create_material_use_case),
) -> CreateMaterialResponse:
    """Register a material; initial stock is booked as an ADJUSTMENT."""
    result = await use_case.execute(request)
    return use_case.to_response(result)


@router.get(
    "/{material_id}",
    response_model=MaterialResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_material(
    material_id: int,
    store: SQLiteMaterialStore = Depends(get_mat_store),
) -> MaterialResponse:
    """Get a material with its derived stock status."""
    material = await store.get_material(material_id)
    if material is None:
        raise HTTPException(status_code=404, detail=f"Material not found: {material_id}")
    return material_to_response(material)


@router.post(
    "/{material_id}/adjust",
    response_model=AdjustMaterialResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def adjust_material(
    material_id: int,
    request: AdjustMaterialRequest,
    use_case: AdjustMaterialStockUseCase = Depends(get_adjust_material_use_case),
) -> AdjustMaterialResponse:
    """Correct stock with a signed ADJUSTMENT; negative results clamp to zero."""
    result = await use_case.execute(material_id, request)
    return use_case.to_response(result)
