"""Fixed-point rounding helpers shared by the ledger services."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def quantize_money(value: Decimal) -> Decimal:
    """Round a currency amount to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)

