"""Shared helpers for cart totals and quantities."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from shopcart.domain.models.product import CartLineItem

from .constants import MONEY_PLACES, TAX_RATE


def round_money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def calc_subtotal(items: Iterable[CartLineItem]) -> Decimal:
    return sum((item.line_total for item in items), Decimal("0"))


def calc_item_count(items: Iterable[CartLineItem]) -> int:
    return sum(item.quantity for item in items)


def clamp_quantity(quantity: int, max_quantity: int) -> int:
    return max(1, min(quantity, max_quantity))


@dataclass(frozen=True, slots=True)
class CartTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    item_count: int

    def to_dict(self) -> dict[str, float | int]:
        return {
            "subtotal": float(self.subtotal),
            "tax": float(self.tax),
            "total": float(self.total),
            "itemCount": self.item_count,
        }


def calc_totals(items: Iterable[CartLineItem], tax_rate: Decimal = TAX_RATE) -> CartTotals:
    """Compute totals from line items.

    Accumulation is exact; rounding to cents happens only on the returned
    values, so tax and total are derived from the unrounded subtotal.
    """
    items = tuple(items)
    subtotal = calc_subtotal(items)
    tax = subtotal * tax_rate
    return CartTotals(
        subtotal=round_money(subtotal),
        tax=round_money(tax),
        total=round_money(subtotal + tax),
        item_count=calc_item_count(items),
    )
