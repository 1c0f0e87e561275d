"""Entity to response DTO conversion shared by use cases and routes."""

import math
from datetime import date

from printledger.application.dto.responses import (
    BatchResponse,
    MaterialResponse,
    MovementResponse,
    PaginationResponse,
    ProductionCostResponse,
    ProductionJobResponse,
)
from printledger.core.entities.batch import MaterialBatch
from printledger.core.entities.material import Material
from printledger.core.entities.movement import InventoryMovement
from printledger.core.entities.production import ProductionCost, ProductionJob
from printledger.core.services.stock_classifier import (
    DEFAULT_NEAR_EXPIRY_DAYS,
    classify_batch,
    classify_material,
)


def material_to_response(material: Material) -> MaterialResponse:
    return MaterialResponse(
        id=material.id,  # type: ignore[arg-type]
        name=material.name,
        type=material.type,
        unit=material.unit,
        stock=material.stock,
        min_stock=material.min_stock,
        max_stock=material.max_stock,
        cost_per_unit=material.cost_per_unit,
        supplier=material.supplier,
        location=material.location,
        stock_status=classify_material(material).value,
        stock_value=material.stock_value,
        days_of_stock=material.days_of_stock,
        created_at=material.created_at,
        updated_at=material.updated_at,
    )


def batch_to_response(
    batch: MaterialBatch,
    today: date,
    near_expiry_days: int = DEFAULT_NEAR_EXPIRY_DAYS,
    material: Material | None = None,
) -> BatchResponse:
    return BatchResponse(
        id=batch.id,  # type: ignore[arg-type]
        batch_number=batch.batch_number,
        material_id=batch.material_id,
        material_name=material.name if material else None,
        material_unit=material.unit if material else None,
        purchase_date=batch.purchase_date,
        supplier=batch.supplier,
        invoice_number=batch.invoice_number,
        original_qty=batch.original_qty,
        current_qty=batch.current_qty,
        unit_cost=batch.unit_cost,
        total_cost=batch.total_cost,
        expiry_date=batch.expiry_date,
        is_active=batch.is_active,
        status=classify_batch(batch, today, near_expiry_days).value,
        usage_percentage=batch.usage_percentage,
        days_until_expiry=batch.days_until_expiry(today),
        created_at=batch.created_at,
        updated_at=batch.updated_at,
    )


def movement_to_response(movement: InventoryMovement) -> MovementResponse:
    return MovementResponse(
        id=movement.id,  # type: ignore[arg-type]
        movement_number=movement.movement_number,
        type=movement.type.value,
        impact=movement.impact.value,
        material_id=movement.material_id,
        batch_id=movement.batch_id,
        production_job_id=movement.production_job_id,
        quantity=movement.quantity,
        unit_cost=movement.unit_cost,
        total_cost=movement.total_cost,
        stock_after=movement.stock_after,
        reference=movement.reference,
        notes=movement.notes,
        movement_date=movement.movement_date,
        created_by=movement.created_by,
        created_at=movement.created_at,
    )


def job_to_response(job: ProductionJob) -> ProductionJobResponse:
    return ProductionJobResponse(
        id=job.id,  # type: ignore[arg-type]
        job_number=job.job_number,
        name=job.name,
        description=job.description,
        status=job.status.value,
        priority=job.priority,
        estimated_hours=job.estimated_hours,
        actual_hours=job.actual_hours,
        printer=job.printer,
        material=job.material,
        settings=job.settings,
        files=job.files,
        notes=job.notes,
        order_id=job.order_id,
        product_id=job.product_id,
        created_at=job.created_at,
        started_at=job.started_at,
        completed_at=job.completed_at,
        updated_at=job.updated_at,
    )


def cost_to_response(cost: ProductionCost) -> ProductionCostResponse:
    return ProductionCostResponse(
        id=cost.id,  # type: ignore[arg-type]
        production_job_id=cost.production_job_id,
        material_id=cost.material_id,
        material_name=cost.material_name,
        material_unit=cost.material_unit,
        batch_id=cost.batch_id,
        quantity=cost.quantity,
        unit_cost=cost.unit_cost,
        total_cost=cost.total_cost,
        notes=cost.notes,
        created_at=cost.created_at,
    )


def pagination(page: int, limit: int, total: int) -> PaginationResponse:
    return PaginationResponse(
        page=page,
        limit=limit,
        total=total,
        pages=math.ceil(total / limit) if limit else 0,
    )
