"""
Abstract interface for the material registry.

``adjust_stock`` is the single write path for aggregate stock.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from printledger.core.entities.material import Material


class IMaterialStore(ABC):
    """Abstract interface for material persistence."""

    @abstractmethod
    async def create_material(self, material: Material) -> Material:
        """Create a new material record with zero stock."""

    @abstractmethod
    async def get_material(self, material_id: int) -> Material | None:
        """Get material by ID."""

    @abstractmethod
    async def list_materials(
        self,
        material_type: str | None = None,
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[Material]:
        """List materials by name, optionally filtered by type. No limit when None."""

    @abstractmethod
    async def count_materials(self, material_type: str | None = None) -> int:
        """Count materials, optionally filtered by type."""

    @abstractmethod
    async def adjust_stock(self, material_id: int, delta: Decimal) -> Decimal:
        """
        Apply a signed delta to a material's stock and return the new stock.

        The result is clamped at zero. Raises MaterialNotFoundError for an
        unknown id and ConcurrentModificationError if the row changed
        between read and write.
        """
