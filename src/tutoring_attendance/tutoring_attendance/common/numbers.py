from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import MONEY_QUANTUM, RATE_QUANTUM

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def percentage(part: int, total: int) -> Decimal:
    """part/total as a percentage rounded half-up to 2 places; 0 when total is 0."""
    if total <= 0:
        return ZERO.quantize(RATE_QUANTUM)
    return (Decimal(part) * HUNDRED / Decimal(total)).quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)


def round_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)
