from __future__ import annotations

from decimal import Decimal

import pytest

from shopcart.core.exceptions import ValidationError
from shopcart.services.checkout import simulate_checkout


@pytest.mark.asyncio
async def test_checkout_returns_receipt_and_clears(engine, shirt, mug):
    engine.add_item(shirt, 2)
    engine.add_item(mug, 3)

    receipt = await simulate_checkout(engine, delay=0)

    assert receipt.total == Decimal("40.60")
    assert receipt.item_count == 5
    assert [line.id for line in receipt.lines] == [1, 2]
    assert engine.is_empty


@pytest.mark.asyncio
async def test_checkout_refuses_empty_cart(engine):
    with pytest.raises(ValidationError):
        await simulate_checkout(engine, delay=0)
