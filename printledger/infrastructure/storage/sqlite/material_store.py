"""SQLite implementation of the material registry."""

from datetime import UTC, datetime
from decimal import Decimal

import aiosqlite

from printledger.config import get_logger
from printledger.core.entities.material import Material
from printledger.core.exceptions import ConcurrentModificationError, MaterialNotFoundError
from printledger.core.interfaces.material_store import IMaterialStore
from printledger.core.services.movement_rules import clamp_delta
from printledger.infrastructure.storage.sqlite.columns import (
    db_to_dec,
    db_to_dt,
    dec_to_db,
    dt_to_db,
)
from printledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteMaterialStore(IMaterialStore):
    """SQLite implementation of material storage."""

    async def create_material(self, material: Material) -> Material:
        """Insert a material. Stock always starts at zero; initial stock is a movement."""
        now = datetime.now(UTC)
        material.created_at = now
        material.updated_at = now
        material.stock = Decimal("0")
        material.version = 0
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO materials (
                    name, type, unit, stock, min_stock, max_stock,
                    cost_per_unit, supplier, location, version,
                    created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    material.name,
                    material.type,
                    material.unit,
                    dec_to_db(material.stock),
                    dec_to_db(material.min_stock),
                    dec_to_db(material.max_stock),
                    dec_to_db(material.cost_per_unit),
                    material.supplier,
                    material.location,
                    material.version,
                    dt_to_db(material.created_at),
                    dt_to_db(material.updated_at),
                ),
            )
            material.id = cursor.lastrowid
            logger.info("material_created", material_id=material.id, name=material.name)
            return material

    async def get_material(self, material_id: int) -> Material | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM materials WHERE id = ?", (material_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_material(row)

    async def list_materials(
        self,
        material_type: str | None = None,
        limit: int | None = 100,
        offset: int = 0,
    ) -> list[Material]:
        query = "SELECT * FROM materials"
        params: list = []
        if material_type:
            query += " WHERE type = ?"
            params.append(material_type)
        query += " ORDER BY name, id"
        if limit is not None:
            query += " LIMIT ? OFFSET ?"
            params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_material(row) for row in rows]

    async def count_materials(self, material_type: str | None = None) -> int:
        query = "SELECT COUNT(*) FROM materials"
        params: list = []
        if material_type:
            query += " WHERE type = ?"
            params.append(material_type)

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            row = await cursor.fetchone()
            return row[0]

    async def adjust_stock(self, material_id: int, delta: Decimal) -> Decimal:
        """
        Apply ``delta`` to stock, clamped at zero.

        Read and write happen on the caller's transaction connection; the
        version guard turns a lost update into ConcurrentModificationError.
        """
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "SELECT stock, version FROM materials WHERE id = ?", (material_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                raise MaterialNotFoundError(material_id)

            current = db_to_dec(row["stock"])
            new_stock = current + clamp_delta(current, delta)
            cursor = await conn.execute(
                """
                UPDATE materials
                SET stock = ?, version = version + 1, updated_at = ?
                WHERE id = ? AND version = ?
                """,
                (
                    dec_to_db(new_stock),
                    dt_to_db(datetime.now(UTC)),
                    material_id,
                    row["version"],
                ),
            )
            if cursor.rowcount != 1:
                raise ConcurrentModificationError(
                    "Material", material_id, reason="stock changed during update"
                )

            logger.info(
                "material_stock_adjusted",
                material_id=material_id,
                delta=delta,
                stock_after=new_stock,
            )
            return new_stock

    @staticmethod
    def _row_to_material(row: aiosqlite.Row) -> Material:
        """Convert a database row to a Material entity."""
        return Material(
            id=row["id"],
            name=row["name"],
            type=row["type"],
            unit=row["unit"],
            stock=db_to_dec(row["stock"]),
            min_stock=db_to_dec(row["min_stock"]),
            max_stock=db_to_dec(row["max_stock"]),
            cost_per_unit=db_to_dec(row["cost_per_unit"]),
            supplier=row["supplier"],
            location=row["location"],
            version=row["version"],
            created_at=db_to_dt(row["created_at"]),
            updated_at=db_to_dt(row["updated_at"]),
        )
