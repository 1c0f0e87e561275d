"""SQLite implementation of the inventory movement ledger."""

from datetime import UTC, datetime

import aiosqlite

from printledger.config import get_logger
from printledger.core.entities.movement import (
    MOVEMENT_NUMBER_FORMAT,
    InventoryMovement,
    MovementType,
)
from printledger.core.interfaces.movement_store import IMovementStore
from printledger.infrastructure.storage.sqlite.columns import (
    db_to_dec,
    db_to_dt,
    dec_to_db,
    dt_to_db,
)
from printledger.infrastructure.storage.sqlite.connection import (
    get_connection,
    write_transaction,
)
from printledger.infrastructure.storage.sqlite.sequence_store import (
    MOVEMENT_SEQUENCE,
    SQLiteSequenceStore,
)

logger = get_logger(__name__)


class SQLiteMovementStore(IMovementStore):
    """Append-only: there is no update or delete path."""

    def __init__(self, sequences: SQLiteSequenceStore | None = None):
        self._sequences = sequences or SQLiteSequenceStore()

    async def add_movement(self, movement: InventoryMovement) -> InventoryMovement:
        movement.created_at = datetime.now(UTC)
        async with write_transaction() as conn:
            number = await self._sequences.next_value(MOVEMENT_SEQUENCE)
            movement.movement_number = MOVEMENT_NUMBER_FORMAT.format(number)
            cursor = await conn.execute(
                """
                INSERT INTO inventory_movements (
                    movement_number, type, material_id, batch_id,
                    production_job_id, quantity, unit_cost, total_cost,
                    stock_after, reference, notes, movement_date,
                    created_by, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    movement.movement_number,
                    movement.type.value,
                    movement.material_id,
                    movement.batch_id,
                    movement.production_job_id,
                    dec_to_db(movement.quantity),
                    dec_to_db(movement.unit_cost),
                    dec_to_db(movement.total_cost),
                    dec_to_db(movement.stock_after),
                    movement.reference,
                    movement.notes,
                    dt_to_db(movement.movement_date),
                    movement.created_by,
                    dt_to_db(movement.created_at),
                ),
            )
            movement.id = cursor.lastrowid
            logger.info(
                "movement_recorded",
                movement_id=movement.id,
                movement_number=movement.movement_number,
                type=movement.type.value,
                material_id=movement.material_id,
                qty=movement.quantity,
                stock_after=movement.stock_after,
            )
            return movement

    async def get_movement(self, movement_id: int) -> InventoryMovement | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM inventory_movements WHERE id = ?", (movement_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_movement(row)

    async def list_movements(
        self,
        material_id: int | None = None,
        movement_type: MovementType | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[InventoryMovement]:
        where, params = self._filters(material_id, movement_type)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM inventory_movements
                {where}
                ORDER BY movement_date DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                [*params, limit, offset],
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    async def count_movements(
        self,
        material_id: int | None = None,
        movement_type: MovementType | None = None,
    ) -> int:
        where, params = self._filters(material_id, movement_type)
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT COUNT(*) FROM inventory_movements {where}", params
            )
            row = await cursor.fetchone()
            return row[0] if row else 0

    @staticmethod
    def _filters(
        material_id: int | None, movement_type: MovementType | None
    ) -> tuple[str, list]:
        conditions = []
        params: list = []
        if material_id is not None:
            conditions.append("material_id = ?")
            params.append(material_id)
        if movement_type is not None:
            conditions.append("type = ?")
            params.append(movement_type.value)
        where = "WHERE " + " AND ".join(conditions) if conditions else ""
        return where, params

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> InventoryMovement:
        """Convert a database row to an InventoryMovement entity."""
        return InventoryMovement(
            id=row["id"],
            movement_number=row["movement_number"],
            type=MovementType(row["type"]),
            material_id=row["material_id"],
            batch_id=row["batch_id"],
            production_job_id=row["production_job_id"],
            quantity=db_to_dec(row["quantity"]),
            unit_cost=db_to_dec(row["unit_cost"]),
            total_cost=db_to_dec(row["total_cost"]),
            stock_after=db_to_dec(row["stock_after"]),
            reference=row["reference"],
            notes=row["notes"],
            movement_date=db_to_dt(row["movement_date"]),
            created_by=row["created_by"],
            created_at=db_to_dt(row["created_at"]),
        )
