"""Abstract interface for material batch storage."""

from abc import ABC, abstractmethod
from decimal import Decimal

from printledger.core.entities.batch import MaterialBatch


class IBatchStore(ABC):
    """Abstract interface for purchase-lot persistence."""

    @abstractmethod
    async def create_batch(self, batch: MaterialBatch) -> MaterialBatch:
        """Insert a batch and assign its sequential batch number."""

    @abstractmethod
    async def get_batch(self, batch_id: int) -> MaterialBatch | None:
        """Get batch by ID."""

    @abstractmethod
    async def list_by_material(
        self, material_id: int, include_inactive: bool = False
    ) -> list[MaterialBatch]:
        """List a material's batches, oldest purchase first."""

    @abstractmethod
    async def list_batches(
        self,
        material_id: int | None = None,
        include_inactive: bool = True,
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[MaterialBatch]:
        """List batches, active first then newest purchase date. No limit when None."""

    @abstractmethod
    async def count_batches(
        self, material_id: int | None = None, include_inactive: bool = True
    ) -> int:
        """Count batches matching the same filters as list_batches."""

    @abstractmethod
    async def list_available(self, material_id: int) -> list[MaterialBatch]:
        """Active batches with remaining quantity, in FIFO order."""

    @abstractmethod
    async def decrement_batch(self, batch_id: int, quantity: Decimal) -> MaterialBatch:
        """
        Remove ``quantity`` from a batch.

        Raises InsufficientQuantityError if the batch holds less than
        ``quantity``; the result is floored at zero.
        """

    @abstractmethod
    async def adjust_batch(self, batch_id: int, delta: Decimal) -> MaterialBatch:
        """Move current_qty by ``delta``, kept within [0, original_qty]."""

    @abstractmethod
    async def deactivate_batch(self, batch_id: int) -> MaterialBatch:
        """Soft-disable a batch."""
