"""Simulated checkout. No payment is processed."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from shopcart.core.cart_math import CartTotals
from shopcart.core.constants import CHECKOUT_DELAY_SECONDS
from shopcart.core.exceptions import ValidationError
from shopcart.domain.models.product import CartLineItem

from .cart_engine import CartEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CheckoutReceipt:
    totals: CartTotals
    lines: tuple[CartLineItem, ...]
    completed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total(self):
        return self.totals.total

    @property
    def item_count(self) -> int:
        return self.totals.item_count


async def simulate_checkout(engine: CartEngine, delay: float = CHECKOUT_DELAY_SECONDS) -> CheckoutReceipt:
    """Pretend to place an order for the current cart, then empty it.

    Totals are captured when checkout starts.
    """
    if engine.is_empty:
        raise ValidationError("Cannot check out an empty cart")

    lines = engine.items
    totals = engine.totals()
    logger.info("Checkout started: %s item(s), total %s", totals.item_count, totals.total)

    await asyncio.sleep(delay)

    engine.clear()
    logger.info("Checkout completed, total %s", totals.total)
    return CheckoutReceipt(totals=totals, lines=lines)
