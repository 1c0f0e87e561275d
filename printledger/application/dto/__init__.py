"""Data transfer objects between the API and the use cases."""

from printledger.application.dto.requests import (
    AddProductionCostRequest,
    AdjustMaterialRequest,
    CreateBatchRequest,
    CreateMaterialRequest,
    CreateProductionJobRequest,
    RecordMovementRequest,
    UpdateProductionJobRequest,
)
from printledger.application.dto.responses import (
    ErrorResponse,
    HealthResponse,
    ProductionTotalsResponse,
)

__all__ = [
    # Requests
    "CreateMaterialRequest",
    "AdjustMaterialRequest",
    "CreateBatchRequest",
    "RecordMovementRequest",
    "AddProductionCostRequest",
    "CreateProductionJobRequest",
    "UpdateProductionJobRequest",
    # Responses
    "ErrorResponse",
    "HealthResponse",
    "ProductionTotalsResponse",
]
