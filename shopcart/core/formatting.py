"""Presentation helpers for cart views."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from .constants import MAX_TITLE_LENGTH

UNTITLED = "Sin título"


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool) or value is None:
        return Decimal("0")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return number if number.is_finite() else Decimal("0")


def format_price(value: Any) -> str:
    """Format an amount as Colombian pesos without decimals: ``$ 1.234``."""
    amount = _to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(amount):,.0f}".replace(",", ".")
    return f"{sign}$ {grouped}"


def truncate_title(title: str | None, max_length: int = MAX_TITLE_LENGTH) -> str:
    if not title:
        return UNTITLED
    if len(title) <= max_length:
        return title
    return title[:max_length] + "..."
