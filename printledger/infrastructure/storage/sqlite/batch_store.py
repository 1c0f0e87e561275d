"""SQLite implementation of material batch storage."""

from datetime import UTC, datetime
from decimal import Decimal

import aiosqlite

from printledger.config import get_logger
from printledger.core.entities.batch import BATCH_NUMBER_FORMAT, MaterialBatch
from printledger.core.exceptions import (
    BatchNotFoundError,
    ConcurrentModificationError,
    InsufficientQuantityError,
)
from printledger.core.interfaces.batch_store import IBatchStore
from printledger.infrastructure.storage.sqlite.columns import (
    db_to_date,
    db_to_dec,
    db_to_dt,
    dec_to_db,
    dt_to_db,
)
from printledger.infrastructure.storage.sqlite.connection import (
    get_connection,
    get_transaction,
    write_transaction,
)
from printledger.infrastructure.storage.sqlite.sequence_store import (
    BATCH_SEQUENCE,
    SQLiteSequenceStore,
)

logger = get_logger(__name__)


class SQLiteBatchStore(IBatchStore):
    """SQLite implementation of purchase-lot storage."""

    def __init__(self, sequences: SQLiteSequenceStore | None = None):
        self._sequences = sequences or SQLiteSequenceStore()

    async def create_batch(self, batch: MaterialBatch) -> MaterialBatch:
        now = datetime.now(UTC)
        batch.created_at = now
        batch.updated_at = now
        batch.version = 0
        async with write_transaction() as conn:
            number = await self._sequences.next_value(BATCH_SEQUENCE)
            batch.batch_number = BATCH_NUMBER_FORMAT.format(number)
            cursor = await conn.execute(
                """
                INSERT INTO material_batches (
                    batch_number, material_id, purchase_date, supplier,
                    invoice_number, original_qty, current_qty, unit_cost,
                    total_cost, expiry_date, is_active, version,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    batch.batch_number,
                    batch.material_id,
                    batch.purchase_date.isoformat(),
                    batch.supplier,
                    batch.invoice_number,
                    dec_to_db(batch.original_qty),
                    dec_to_db(batch.current_qty),
                    dec_to_db(batch.unit_cost),
                    dec_to_db(batch.total_cost),
                    batch.expiry_date.isoformat() if batch.expiry_date else None,
                    1 if batch.is_active else 0,
                    batch.version,
                    dt_to_db(batch.created_at),
                    dt_to_db(batch.updated_at),
                ),
            )
            batch.id = cursor.lastrowid
            logger.info(
                "batch_created",
                batch_id=batch.id,
                batch_number=batch.batch_number,
                material_id=batch.material_id,
                qty=batch.original_qty,
            )
            return batch

    async def get_batch(self, batch_id: int) -> MaterialBatch | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM material_batches WHERE id = ?", (batch_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_batch(row)

    async def list_by_material(
        self, material_id: int, include_inactive: bool = False
    ) -> list[MaterialBatch]:
        query = "SELECT * FROM material_batches WHERE material_id = ?"
        if not include_inactive:
            query += " AND is_active = 1"
        query += " ORDER BY purchase_date ASC, id ASC"

        async with get_connection() as conn:
            cursor = await conn.execute(query, (material_id,))
            rows = await cursor.fetchall()
            return [self._row_to_batch(row) for row in rows]

    async def list_batches(
        self,
        material_id: int | None = None,
        include_inactive: bool = True,
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[MaterialBatch]:
        conditions = []
        params: list = []
        if material_id is not None:
            conditions.append("material_id = ?")
            params.append(material_id)
        if not include_inactive:
            conditions.append("is_active = 1")

        query = "SELECT * FROM material_batches"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY is_active DESC, purchase_date DESC, id DESC"
        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_batch(row) for row in rows]

    async def count_batches(
        self, material_id: int | None = None, include_inactive: bool = True
    ) -> int:
        conditions = []
        params: list = []
        if material_id is not None:
            conditions.append("material_id = ?")
            params.append(material_id)
        if not include_inactive:
            conditions.append("is_active = 1")

        query = "SELECT COUNT(*) FROM material_batches"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            row = await cursor.fetchone()
            return row[0]

    async def list_available(self, material_id: int) -> list[MaterialBatch]:
        # current_qty is TEXT, so the "> 0" filter is applied on parsed values
        batches = await self.list_by_material(material_id, include_inactive=False)
        return [b for b in batches if b.current_qty > 0]

    async def decrement_batch(self, batch_id: int, quantity: Decimal) -> MaterialBatch:
        async with get_transaction() as conn:
            batch = await self._load_for_update(conn, batch_id)
            if quantity > batch.current_qty:
                raise InsufficientQuantityError(
                    quantity,
                    batch.current_qty,
                    batch_id=batch_id,
                    material_id=batch.material_id,
                )
            new_qty = max(batch.current_qty - quantity, Decimal("0"))
            updated = await self._write_qty(conn, batch, new_qty)
            logger.info(
                "batch_decremented",
                batch_id=batch_id,
                qty=quantity,
                current_qty=new_qty,
            )
            return updated

    async def adjust_batch(self, batch_id: int, delta: Decimal) -> MaterialBatch:
        async with get_transaction() as conn:
            batch = await self._load_for_update(conn, batch_id)
            new_qty = min(max(batch.current_qty + delta, Decimal("0")), batch.original_qty)
            updated = await self._write_qty(conn, batch, new_qty)
            logger.info(
                "batch_adjusted",
                batch_id=batch_id,
                delta=delta,
                current_qty=new_qty,
            )
            return updated

    async def deactivate_batch(self, batch_id: int) -> MaterialBatch:
        async with get_transaction() as conn:
            batch = await self._load_for_update(conn, batch_id)
            now = datetime.now(UTC)
            cursor = await conn.execute(
                """
                UPDATE material_batches
                SET is_active = 0, version = version + 1, updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (dt_to_db(now), batch_id, batch.version),
            )
            if cursor.rowcount != 1:
                raise ConcurrentModificationError("Batch", batch_id)
            batch.is_active = False
            batch.version += 1
            batch.updated_at = now
            logger.info("batch_deactivated", batch_id=batch_id)
            return batch

    async def _load_for_update(
        self, conn: aiosqlite.Connection, batch_id: int
    ) -> MaterialBatch:
        cursor = await conn.execute(
            "SELECT * FROM material_batches WHERE id = ?", (batch_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            raise BatchNotFoundError(batch_id)
        return self._row_to_batch(row)

    async def _write_qty(
        self, conn: aiosqlite.Connection, batch: MaterialBatch, new_qty: Decimal
    ) -> MaterialBatch:
        now = datetime.now(UTC)
        cursor = await conn.execute(
            """
            UPDATE material_batches
            SET current_qty = ?, version = version + 1, updated_at = ?
            WHERE id = ? AND version = ?
            """,
            (dec_to_db(new_qty), dt_to_db(now), batch.id, batch.version),
        )
        if cursor.rowcount != 1:
            raise ConcurrentModificationError(
                "Batch", batch.id, reason="quantity changed during update"
            )
        batch.current_qty = new_qty
        batch.version += 1
        batch.updated_at = now
        return batch

    @staticmethod
    def _row_to_batch(row: aiosqlite.Row) -> MaterialBatch:
        """Convert a database row to a MaterialBatch entity."""
        return MaterialBatch(
            id=row["id"],
            batch_number=row["batch_number"],
            material_id=row["material_id"],
            purchase_date=db_to_date(row["purchase_date"]),
            supplier=row["supplier"],
            invoice_number=row["invoice_number"],
            original_qty=db_to_dec(row["original_qty"]),
            current_qty=db_to_dec(row["current_qty"]),
            unit_cost=db_to_dec(row["unit_cost"]),
            expiry_date=db_to_date(row["expiry_date"]),
            is_active=bool(row["is_active"]),
            version=row["version"],
            created_at=db_to_dt(row["created_at"]),
            updated_at=db_to_dt(row["updated_at"]),
        )
