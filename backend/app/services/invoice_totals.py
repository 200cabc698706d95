"""Invoice total computation."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")


def _to_decimal(value: Decimal | float | int | str | None) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def calculate_line_total(
    quantity: Decimal | float | int | None,
    unit_price: Decimal | float | int | None,
    use_quantity: bool = True,
) -> Decimal:
    """Return quantity * unit_price, or unit_price alone for flat-amount lines."""
    price = _to_decimal(unit_price)
    if use_quantity:
        total = _to_decimal(quantity) * price
    else:
        total = price
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_invoice_total(line_totals: Iterable[Decimal]) -> Decimal:
    total = sum((Decimal(str(value)) for value in line_totals), Decimal("0.00"))
    return total.quantize(CENT, rounding=ROUND_HALF_UP)
