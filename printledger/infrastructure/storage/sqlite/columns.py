"""Column codecs shared by the SQLite stores."""

from datetime import UTC, date, datetime
from decimal import Decimal


def dec_to_db(value: Decimal | None) -> str | None:
    """Decimals are stored as canonical TEXT so no precision is lost."""
    if value is None:
        return None
    return str(value)


def db_to_dec(value: str | int | float | None) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))


def dt_to_db(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def db_to_dt(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def db_to_date(value: str | None) -> date | None:
    if not value:
        return None
    return date.fromisoformat(value[:10])
