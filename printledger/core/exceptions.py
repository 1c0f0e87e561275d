"""
Domain exceptions for the inventory ledger.

Every failure is detected inside the mutating operation and raised before the
surrounding transaction commits.
"""

from decimal import Decimal
from typing import Any


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Lookup Exceptions
class NotFoundError(LedgerError):
    """Referenced record does not exist."""

    def __init__(self, entity: str, entity_id: Any, code: str | None = None):
        super().__init__(
            f"{entity} not found: {entity_id}",
            code=code or "NOT_FOUND",
            details={"entity": entity, "id": entity_id},
        )


class MaterialNotFoundError(NotFoundError):
    """Material not found."""

    def __init__(self, material_id: int):
        super().__init__("Material", material_id, code="MATERIAL_NOT_FOUND")


class BatchNotFoundError(NotFoundError):
    """Material batch not found."""

    def __init__(self, batch_id: int):
        super().__init__("Batch", batch_id, code="BATCH_NOT_FOUND")


class ProductionJobNotFoundError(NotFoundError):
    """Production job not found."""

    def __init__(self, job_id: int):
        super().__init__("Production job", job_id, code="JOB_NOT_FOUND")


class ProductNotFoundError(NotFoundError):
    """Catalog product not found."""

    def __init__(self, product_id: int):
        super().__init__("Product", product_id, code="PRODUCT_NOT_FOUND")


# Validation Exceptions
class InvalidArgumentError(LedgerError):
    """Input is missing or out of range."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Invalid value for '{field}': {message}",
            code="INVALID_ARGUMENT",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


# Stock Exceptions
class InsufficientQuantityError(LedgerError):
    """A batch does not hold enough remaining quantity."""

    def __init__(
        self,
        requested: Decimal,
        available: Decimal,
        batch_id: int | None = None,
        material_id: int | None = None,
    ):
        target = f"batch {batch_id}" if batch_id is not None else f"material {material_id}"
        super().__init__(
            f"Insufficient quantity in {target}: requested {requested}, available {available}",
            code="INSUFFICIENT_QUANTITY",
            details={
                "batch_id": batch_id,
                "material_id": material_id,
                "requested": str(requested),
                "available": str(available),
            },
        )


class InsufficientStockError(LedgerError):
    """Material aggregate stock cannot cover a consumption."""

    def __init__(self, material_id: int, requested: Decimal, available: Decimal):
        super().__init__(
            f"Insufficient stock for material {material_id}: "
            f"requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "material_id": material_id,
                "requested": str(requested),
                "available": str(available),
            },
        )


# Concurrency / State Exceptions
class ConcurrentModificationError(LedgerError):
    """A row changed underneath the current transaction, or the lock timed out."""

    def __init__(self, entity: str, entity_id: Any, reason: str | None = None):
        super().__init__(
            f"Concurrent modification of {entity} {entity_id}"
            + (f": {reason}" if reason else ""),
            code="CONCURRENT_MODIFICATION",
            details={"entity": entity, "id": entity_id, "reason": reason},
        )


class InvalidStateTransitionError(LedgerError):
    """Operation not allowed from the current state."""

    def __init__(self, current: str, target: str, reason: str | None = None):
        super().__init__(
            reason or f"Cannot move from {current} to {target}",
            code="INVALID_STATE_TRANSITION",
            details={"current": current, "target": target},
        )


# Storage Exceptions
class StorageError(LedgerError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class MigrationError(StorageError):
    """A schema migration could not be applied."""

    def __init__(self, version: int, reason: str):
        super().__init__(
            f"Migration v{version:03d} failed: {reason}",
            code="MIGRATION_FAILED",
            details={"version": version, "reason": reason},
        )
        self.version = version


class ConfigurationError(LedgerError):
    """Configuration error."""

    pass
