"""API route modules."""

from printledger.api.routes.batches import router as batches_router
from printledger.api.routes.health import router as health_router
from printledger.api.routes.materials import router as materials_router
from printledger.api.routes.movements import router as movements_router
from printledger.api.routes.production import router as production_router

__all__ = [
    "health_router",
    "materials_router",
    "batches_router",
    "movements_router",
    "production_router",
]
