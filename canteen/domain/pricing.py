# canteen/domain/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple

from canteen.domain.models import CartLine

CENT = Decimal("0.01")


class OrderTotals(NamedTuple):
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal


def to_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_totals(lines: Iterable[CartLine], tax_rate: Decimal) -> OrderTotals:
    subtotal = to_money(sum((line.price * line.quantity for line in lines), Decimal("0.00")))
    tax_amount = to_money(subtotal * tax_rate)
    return OrderTotals(subtotal, tax_amount, subtotal + tax_amount)
