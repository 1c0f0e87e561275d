"""Database migrations module."""

from printledger.infrastructure.storage.sqlite.migrations.migrator import (
    Migration,
    check_ledger_schema,
    discover_migrations,
    get_migration_status,
    initialize_database,
)

__all__ = [
    "Migration",
    "check_ledger_schema",
    "discover_migrations",
    "get_migration_status",
    "initialize_database",
]
