"""
Ledger schema migrations.

Migration files are named ``vNNN_<name>.sql`` and applied in version order.
Each applied file is recorded in ``schema_migrations`` with a checksum; an
applied file whose content later changes stops the run, since the ledger
tables it created are already in use.

After migrating, the schema is checked against what the stores rely on:
the ledger tables, the unique display-number indexes, and a seeded counter
per number series that is not behind the highest number already issued.
"""

import asyncio
import hashlib
import re
import time
from dataclasses import dataclass
from pathlib import Path

import aiosqlite

from printledger.config import get_logger, get_settings
from printledger.core.entities import (
    BATCH_NUMBER_FORMAT,
    JOB_NUMBER_FORMAT,
    MOVEMENT_NUMBER_FORMAT,
)
from printledger.core.exceptions import MigrationError
from printledger.infrastructure.storage.sqlite.sequence_store import (
    BATCH_SEQUENCE,
    JOB_SEQUENCE,
    MOVEMENT_SEQUENCE,
)

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
_FILENAME = re.compile(r"v(\d{3})_(\w+)\.sql")

LEDGER_TABLES = (
    "materials",
    "material_batches",
    "inventory_movements",
    "production_jobs",
    "production_costs",
    "products",
    "sequences",
)


@dataclass(frozen=True)
class NumberSeries:
    """A display-number series: its counter, table, column and prefix."""

    sequence: str
    table: str
    column: str
    index: str
    number_format: str

    @property
    def prefix(self) -> str:
        return self.number_format.split("{")[0]


NUMBER_SERIES = (
    NumberSeries(
        BATCH_SEQUENCE, "material_batches", "batch_number", "idx_batches_number",
        BATCH_NUMBER_FORMAT,
    ),
    NumberSeries(
        MOVEMENT_SEQUENCE, "inventory_movements", "movement_number",
        "idx_movements_number", MOVEMENT_NUMBER_FORMAT,
    ),
    NumberSeries(
        JOB_SEQUENCE, "production_jobs", "job_number", "idx_jobs_number",
        JOB_NUMBER_FORMAT,
    ),
)


@dataclass(frozen=True)
class Migration:
    version: int
    name: str
    path: Path
    checksum: str

    @classmethod
    def load(cls, path: Path) -> "Migration":
        match = _FILENAME.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        checksum = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(int(match.group(1)), match.group(2), path, checksum)

    @property
    def label(self) -> str:
        return f"v{self.version:03d}_{self.name}"


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """Migration files in ``directory``, lowest version first."""
    migrations = [Migration.load(path) for path in directory.glob("v*.sql")]
    migrations.sort(key=lambda m: m.version)
    return migrations


async def applied_checksums(conn: aiosqlite.Connection) -> dict[int, str]:
    cursor = await conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'schema_migrations'"
    )
    if await cursor.fetchone() is None:
        return {}
    cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    return {int(version): checksum for version, checksum in await cursor.fetchall()}


async def _apply(conn: aiosqlite.Connection, migration: Migration) -> None:
    started = time.perf_counter()
    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            """
            INSERT INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (
                f"{migration.version:03d}",
                migration.name,
                migration.checksum,
                int((time.perf_counter() - started) * 1000),
            ),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", migration=migration.label, error=str(e))
        raise MigrationError(migration.version, str(e)) from e
    logger.info("migration_applied", migration=migration.label)


async def initialize_database(
    db_path: Path | None = None,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> list[Migration]:
    """
    Apply every pending migration and check the resulting ledger schema.

    Returns the migrations applied by this call; an up-to-date database
    returns an empty list.

    Raises:
        MigrationError: an applied file changed, a file failed to apply,
            or the migrated schema is missing something the stores need
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    applied_now: list[Migration] = []
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")

        applied = await applied_checksums(conn)
        for migration in discover_migrations(migrations_dir):
            recorded = applied.get(migration.version)
            if recorded is None:
                await _apply(conn, migration)
                applied_now.append(migration)
            elif recorded != migration.checksum:
                raise MigrationError(
                    migration.version, "file changed after it was applied"
                )

        problems = await check_ledger_schema(conn)
    if problems:
        raise MigrationError(
            max((m.version for m in applied_now), default=0), "; ".join(problems)
        )

    logger.info("database_ready", applied=[m.label for m in applied_now])
    return applied_now


async def check_ledger_schema(conn: aiosqlite.Connection) -> list[str]:
    """Problems that would break the ledger stores; empty when the schema is sound."""
    problems = []

    cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
    tables = {row[0] for row in await cursor.fetchall()}
    missing = [t for t in LEDGER_TABLES if t not in tables]
    if missing:
        return [f"missing tables: {', '.join(missing)}"]

    cursor = await conn.execute("SELECT name, value FROM sequences")
    counters = {name: value for name, value in await cursor.fetchall()}

    for series in NUMBER_SERIES:
        cursor = await conn.execute(f"PRAGMA index_list({series.table})")
        unique = {row[1] for row in await cursor.fetchall() if row[2]}
        if series.index not in unique:
            problems.append(f"{series.table}.{series.column} is not uniquely indexed")

        if series.sequence not in counters:
            problems.append(f"sequence '{series.sequence}' is not seeded")
            continue
        cursor = await conn.execute(
            f"SELECT MAX(CAST(substr({series.column}, ?) AS INTEGER)) FROM {series.table}",
            (len(series.prefix) + 1,),
        )
        highest = (await cursor.fetchone())[0] or 0
        if counters[series.sequence] < highest:
            problems.append(
                f"sequence '{series.sequence}' at {counters[series.sequence]} "
                f"is behind {series.number_format.format(highest)}"
            )

    cursor = await conn.execute("PRAGMA foreign_key_check")
    violations = await cursor.fetchall()
    if violations:
        problems.append(f"{len(violations)} foreign key violations")

    return problems


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Current version, pending migrations and schema problems."""
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()
    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "pending": [m.label for m in discovered],
            "problems": [],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await applied_checksums(conn)
        problems = await check_ledger_schema(conn) if applied else []
    return {
        "exists": True,
        "current_version": max(applied, default=None),
        "pending": [m.label for m in discovered if m.version not in applied],
        "problems": problems,
    }


def main() -> None:
    """CLI: migrate the ledger database, or report its status."""
    import argparse

    parser = argparse.ArgumentParser(description="PrintLedger schema migrator")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    parser.add_argument(
        "--status", action="store_true", help="Show version, pending files and schema problems"
    )
    args = parser.parse_args()

    async def run() -> int:
        if args.status:
            status = await get_migration_status(args.db_path)
            print(f"Database exists: {status['exists']}")
            print(f"Current version: {status['current_version']}")
            print(f"Pending: {', '.join(status['pending']) or 'none'}")
            for problem in status["problems"]:
                print(f"[FAIL] {problem}")
            return 1 if status["problems"] else 0

        try:
            applied = await initialize_database(args.db_path)
        except MigrationError as e:
            print(f"[FAIL] {e.message}")
            return 1
        for migration in applied:
            print(f"[APPLIED] {migration.label}")
        if not applied:
            print("Schema is up to date")
        return 0

    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
