"""Monotonic display-number counters."""

from printledger.config import get_logger
from printledger.core.exceptions import DatabaseError
from printledger.infrastructure.storage.sqlite.connection import get_transaction

logger = get_logger(__name__)

BATCH_SEQUENCE = "batch"
MOVEMENT_SEQUENCE = "movement"
JOB_SEQUENCE = "job"


class SQLiteSequenceStore:
    """
    Issues the next value of a named counter.

    Must run inside the transaction that inserts the numbered row, so a
    rollback also gives the number back and two writers never share one.
    """

    async def next_value(self, name: str) -> int:
        async with get_transaction() as conn:
            await conn.execute(
                "INSERT OR IGNORE INTO sequences (name, value) VALUES (?, 0)",
                (name,),
            )
            await conn.execute(
                "UPDATE sequences SET value = value + 1 WHERE name = ?",
                (name,),
            )
            cursor = await conn.execute(
                "SELECT value FROM sequences WHERE name = ?", (name,)
            )
            row = await cursor.fetchone()
            if row is None:
                raise DatabaseError("next_sequence_value", f"sequence {name} missing")
            logger.debug("sequence_advanced", sequence=name, value=row["value"])
            return int(row["value"])
