"""Pricing rules for carts and orders.

All arithmetic is done on ``Decimal`` with half-up rounding to cents, then
handed to the aggregates as floats (Protean ``Float`` fields). Converting a
quantized ``Decimal`` to ``float`` round-trips through ``str`` exactly, so
``to_money(float(x)) == x`` for every value produced here.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")

DELIVERY_FEE = Decimal("2.99")
TAX_RATE = Decimal("0.10")
LOYALTY_POINTS_PER_UNIT = 10
ESTIMATED_DELIVERY_WINDOW = timedelta(minutes=45)


def to_money(value) -> Decimal:
    """Quantize ``value`` (float, int, str or Decimal) to cents, rounding half-up."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def lines_subtotal(lines: Iterable) -> Decimal:
    """Sum ``unit_price * quantity`` over cart or order lines.

    Lines may be objects with ``unit_price``/``quantity`` attributes or dicts
    with the same keys. Rounding happens once, on the sum.
    """
    total = Decimal("0")
    for line in lines:
        if isinstance(line, dict):
            unit_price, quantity = line["unit_price"], line["quantity"]
        else:
            unit_price, quantity = line.unit_price, line.quantity
        total += Decimal(str(unit_price)) * int(quantity)
    return to_money(total)


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    tax: Decimal
    delivery_fee: Decimal
    total: Decimal

    def as_floats(self) -> dict:
        return {
            "subtotal": float(self.subtotal),
            "tax": float(self.tax),
            "delivery_fee": float(self.delivery_fee),
            "total": float(self.total),
        }


def compute_totals(subtotal) -> PriceBreakdown:
    """Derive the billable breakdown for a (non-negative) subtotal."""
    subtotal = to_money(subtotal)
    tax = to_money(subtotal * TAX_RATE)
    return PriceBreakdown(
        subtotal=subtotal,
        tax=tax,
        delivery_fee=DELIVERY_FEE,
        total=subtotal + tax + DELIVERY_FEE,
    )


def loyalty_points_for(total) -> int:
    """Points earned for an order total: ``floor(total * 10)``."""
    points = to_money(total) * LOYALTY_POINTS_PER_UNIT
    return int(points.to_integral_value(rounding=ROUND_FLOOR))
