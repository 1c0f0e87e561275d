"""SQLite implementation of production job and cost storage."""

import json
from datetime import UTC, date, datetime
from decimal import Decimal

import aiosqlite

from printledger.config import get_logger
from printledger.core.entities.production import (
    JOB_NUMBER_FORMAT,
    JobStatus,
    ProductionCost,
    ProductionJob,
    ProductionStats,
)
from printledger.core.exceptions import ProductionJobNotFoundError
from printledger.core.interfaces.production_store import IProductionStore
from printledger.core.services.money import quantize_money
from printledger.infrastructure.storage.sqlite.columns import (
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
    JOB_SEQUENCE,
    SQLiteSequenceStore,
)

logger = get_logger(__name__)

# Completed jobs sampled for the average completion time
STATS_SAMPLE_SIZE = 100

_COST_SELECT = """
    SELECT pc.*, m.name AS material_name, m.unit AS material_unit
    FROM production_costs pc
    LEFT JOIN materials m ON m.id = pc.material_id
"""


class SQLiteProductionStore(IProductionStore):
    """SQLite implementation of production storage."""

    def __init__(self, sequences: SQLiteSequenceStore | None = None):
        self._sequences = sequences or SQLiteSequenceStore()

    # =========================================================================
    # Jobs
    # =========================================================================

    async def create_job(self, job: ProductionJob) -> ProductionJob:
        now = datetime.now(UTC)
        job.created_at = now
        job.updated_at = now
        async with write_transaction() as conn:
            number = await self._sequences.next_value(JOB_SEQUENCE)
            job.job_number = JOB_NUMBER_FORMAT.format(number)
            cursor = await conn.execute(
                """
                INSERT INTO production_jobs (
                    job_number, name, description, status, priority,
                    estimated_hours, actual_hours, printer, material,
                    settings_json, files_json, notes, order_id, product_id,
                    created_at, started_at, completed_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    job.job_number,
                    job.name,
                    job.description,
                    job.status.value,
                    job.priority,
                    dec_to_db(job.estimated_hours),
                    dec_to_db(job.actual_hours),
                    job.printer,
                    job.material,
                    json.dumps(job.settings),
                    json.dumps(job.files),
                    job.notes,
                    job.order_id,
                    job.product_id,
                    dt_to_db(job.created_at),
                    dt_to_db(job.started_at),
                    dt_to_db(job.completed_at),
                    dt_to_db(job.updated_at),
                ),
            )
            job.id = cursor.lastrowid
            logger.info("production_job_created", job_id=job.id, job_number=job.job_number)
            return job

    async def get_job(self, job_id: int) -> ProductionJob | None:
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT * FROM production_jobs WHERE id = ?", (job_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_job(row)

    async def list_jobs(
        self,
        status: JobStatus | None = None,
        printer: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[ProductionJob]:
        conditions = []
        params: list = []
        if status is not None:
            conditions.append("status = ?")
            params.append(status.value)
        if printer:
            conditions.append("printer = ?")
            params.append(printer)

        query = "SELECT * FROM production_jobs"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY priority DESC, created_at DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_job(row) for row in rows]

    async def update_job(self, job: ProductionJob) -> ProductionJob:
        job.updated_at = datetime.now(UTC)
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                UPDATE production_jobs SET
                    name = ?, description = ?, status = ?, priority = ?,
                    estimated_hours = ?, actual_hours = ?, printer = ?,
                    material = ?, settings_json = ?, files_json = ?, notes = ?,
                    started_at = ?, completed_at = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    job.name,
                    job.description,
                    job.status.value,
                    job.priority,
                    dec_to_db(job.estimated_hours),
                    dec_to_db(job.actual_hours),
                    job.printer,
                    job.material,
                    json.dumps(job.settings),
                    json.dumps(job.files),
                    job.notes,
                    dt_to_db(job.started_at),
                    dt_to_db(job.completed_at),
                    dt_to_db(job.updated_at),
                    job.id,
                ),
            )
            if cursor.rowcount != 1:
                raise ProductionJobNotFoundError(job.id)
            logger.info("production_job_updated", job_id=job.id, status=job.status.value)
            return job

    async def delete_job(self, job_id: int) -> bool:
        async with get_transaction() as conn:
            # Explicit delete so cost rows go even if foreign keys are off
            await conn.execute(
                "DELETE FROM production_costs WHERE production_job_id = ?", (job_id,)
            )
            cursor = await conn.execute(
                "DELETE FROM production_jobs WHERE id = ?", (job_id,)
            )
            deleted = cursor.rowcount > 0
            if deleted:
                logger.info("production_job_deleted", job_id=job_id)
            return deleted

    async def get_stats(self, today: date) -> ProductionStats:
        async with get_connection() as conn:
            cursor = await conn.execute(
                """
                SELECT
                    COUNT(*) AS total,
                    SUM(CASE WHEN status = 'IN_PROGRESS' THEN 1 ELSE 0 END) AS active,
                    SUM(CASE WHEN status = 'QUEUED' THEN 1 ELSE 0 END) AS queued,
                    SUM(CASE WHEN status = 'FAILED' THEN 1 ELSE 0 END) AS failed,
                    SUM(CASE WHEN status = 'COMPLETED'
                             AND substr(completed_at, 1, 10) = ? THEN 1 ELSE 0 END)
                        AS completed_today
                FROM production_jobs
                """,
                (today.isoformat(),),
            )
            counts = await cursor.fetchone()

            cursor = await conn.execute(
                """
                SELECT actual_hours FROM production_jobs
                WHERE status = 'COMPLETED' AND actual_hours IS NOT NULL
                ORDER BY completed_at DESC
                LIMIT ?
                """,
                (STATS_SAMPLE_SIZE,),
            )
            hours = [db_to_dec(row["actual_hours"]) for row in await cursor.fetchall()]

        average = Decimal("0")
        if hours:
            average = quantize_money(sum(hours, Decimal("0")) / len(hours))

        return ProductionStats(
            total_jobs=counts["total"] or 0,
            active_jobs=counts["active"] or 0,
            queued_jobs=counts["queued"] or 0,
            failed_jobs=counts["failed"] or 0,
            completed_today=counts["completed_today"] or 0,
            avg_completion_hours=average,
        )

    # =========================================================================
    # Costs
    # =========================================================================

    async def add_cost(self, cost: ProductionCost) -> ProductionCost:
        cost.created_at = datetime.now(UTC)
        async with get_transaction() as conn:
            cursor = await conn.execute(
                """
                INSERT INTO production_costs (
                    production_job_id, material_id, batch_id, quantity,
                    unit_cost, total_cost, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    cost.production_job_id,
                    cost.material_id,
                    cost.batch_id,
                    dec_to_db(cost.quantity),
                    dec_to_db(cost.unit_cost),
                    dec_to_db(cost.total_cost),
                    cost.notes,
                    dt_to_db(cost.created_at),
                ),
            )
            cost.id = cursor.lastrowid
            logger.info(
                "production_cost_added",
                cost_id=cost.id,
                job_id=cost.production_job_id,
                material_id=cost.material_id,
                total_cost=cost.total_cost,
            )
            return cost

    async def get_costs_for_job(self, job_id: int) -> list[ProductionCost]:
        async with get_connection() as conn:
            cursor = await conn.execute(
                _COST_SELECT + " WHERE pc.production_job_id = ? ORDER BY pc.id ASC",
                (job_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_cost(row) for row in rows]

    async def list_costs(
        self,
        job_id: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ProductionCost]:
        query = _COST_SELECT
        params: list = []
        if job_id is not None:
            query += " WHERE pc.production_job_id = ?"
            params.append(job_id)
        query += " ORDER BY pc.created_at DESC, pc.id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_cost(row) for row in rows]

    async def count_costs(self, job_id: int | None = None) -> int:
        query = "SELECT COUNT(*) FROM production_costs"
        params: list = []
        if job_id is not None:
            query += " WHERE production_job_id = ?"
            params.append(job_id)
        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            row = await cursor.fetchone()
            return row[0] if row else 0

    # =========================================================================
    # Row mappers
    # =========================================================================

    @staticmethod
    def _row_to_job(row: aiosqlite.Row) -> ProductionJob:
        """Convert a database row to a ProductionJob entity."""
        return ProductionJob(
            id=row["id"],
            job_number=row["job_number"],
            name=row["name"],
            description=row["description"],
            status=JobStatus(row["status"]),
            priority=row["priority"],
            estimated_hours=db_to_dec(row["estimated_hours"]),
            actual_hours=db_to_dec(row["actual_hours"]),
            printer=row["printer"],
            material=row["material"],
            settings=json.loads(row["settings_json"] or "{}"),
            files=json.loads(row["files_json"] or "[]"),
            notes=row["notes"],
            order_id=row["order_id"],
            product_id=row["product_id"],
            created_at=db_to_dt(row["created_at"]),
            started_at=db_to_dt(row["started_at"]),
            completed_at=db_to_dt(row["completed_at"]),
            updated_at=db_to_dt(row["updated_at"]),
        )

    @staticmethod
    def _row_to_cost(row: aiosqlite.Row) -> ProductionCost:
        """Convert a joined database row to a ProductionCost entity."""
        return ProductionCost(
            id=row["id"],
            production_job_id=row["production_job_id"],
            material_id=row["material_id"],
            batch_id=row["batch_id"],
            quantity=db_to_dec(row["quantity"]),
            unit_cost=db_to_dec(row["unit_cost"]),
            total_cost=db_to_dec(row["total_cost"]),
            notes=row["notes"],
            created_at=db_to_dt(row["created_at"]),
            material_name=row["material_name"],
            material_unit=row["material_unit"],
        )
