"""Abstract interface for the append-only movement ledger."""

from abc import ABC, abstractmethod

from printledger.core.entities.movement import InventoryMovement, MovementType


class IMovementStore(ABC):
    """Ledger rows are inserted, never updated or deleted."""

    @abstractmethod
    async def add_movement(self, movement: InventoryMovement) -> InventoryMovement:
        """Append a movement and assign its sequential movement number."""

    @abstractmethod
    async def get_movement(self, movement_id: int) -> InventoryMovement | None:
        """Get movement by ID."""

    @abstractmethod
    async def list_movements(
        self,
        material_id: int | None = None,
        movement_type: MovementType | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[InventoryMovement]:
        """List movements, newest first."""

    @abstractmethod
    async def count_movements(
        self,
        material_id: int | None = None,
        movement_type: MovementType | None = None,
    ) -> int:
        """Count movements matching the same filters as list_movements."""
