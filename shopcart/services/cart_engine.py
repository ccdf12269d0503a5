"""Authoritative in-memory cart with debounced write-through persistence."""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from shopcart.core.cart_math import CartTotals, calc_totals
from shopcart.core.constants import (
    CLEAR_CONFIRM_SECONDS,
    ERROR_CLEAR_SECONDS,
    MAX_QUANTITY,
    SAVE_DEBOUNCE_SECONDS,
    TAX_RATE,
)
from shopcart.core.exceptions import NotFoundError, PersistenceError, ValidationError
from shopcart.core.scheduling import AsyncioScheduler, DeferredCall, Scheduler
from shopcart.domain.models.product import CartLineItem, is_valid_item_id, make_line_item, parse_product
from shopcart.integrations.cart_persistence import CartPersistence

logger = logging.getLogger(__name__)


def _validate_item_id(item_id: Any) -> None:
    if not is_valid_item_id(item_id):
        raise ValidationError("Product ID is required")


def _validate_quantity(quantity: Any, allow_zero: bool = False) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Quantity must be an integer")
    if quantity < 0 or (quantity == 0 and not allow_zero):
        if allow_zero:
            raise ValidationError("Quantity must not be negative")
        raise ValidationError("Quantity must be a positive integer")


class CartEngine:
    """
    Owns the cart for one session.

    Mutations are synchronous and return ``True`` when applied and ``False``
    when the referenced line does not exist. Malformed arguments raise
    ``ValidationError`` and leave the cart untouched. Every applied change
    schedules a debounced snapshot write; readers only ever get immutable
    line items and freshly computed totals.
    """

    def __init__(
        self,
        persistence: CartPersistence,
        scheduler: Scheduler | None = None,
        *,
        max_quantity: int = MAX_QUANTITY,
        tax_rate: Decimal = TAX_RATE,
        debounce_seconds: float = SAVE_DEBOUNCE_SECONDS,
        error_timeout_seconds: float = ERROR_CLEAR_SECONDS,
        clear_confirm_seconds: float = CLEAR_CONFIRM_SECONDS,
    ):
        self._persistence = persistence
        self._scheduler = scheduler or AsyncioScheduler()
        self._max_quantity = max_quantity
        self._tax_rate = tax_rate

        self._cart = persistence.load()
        self._last_error: str | None = None
        self._clear_armed = False
        self._closed = False

        self._save_call = DeferredCall(self._scheduler, debounce_seconds, self._write_snapshot, "cart save")
        self._error_call = DeferredCall(self._scheduler, error_timeout_seconds, self.clear_error, "error reset")
        self._confirm_call = DeferredCall(
            self._scheduler, clear_confirm_seconds, self._disarm_clear, "clear confirmation"
        )
        logger.info("Cart engine ready with %s line(s)", len(self._cart))

    def __enter__(self) -> CartEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # =====================================================
    # STATE
    # =====================================================
    @property
    def items(self) -> tuple[CartLineItem, ...]:
        return self._cart.items

    @property
    def is_empty(self) -> bool:
        return self._cart.is_empty()

    @property
    def max_quantity(self) -> int:
        return self._max_quantity

    @property
    def last_error(self) -> str | None:
        """Latest error message.

        The timed reset needs a running event loop; without one the message
        stays until the next successful mutation or ``clear_error()``.
        """
        return self._last_error

    @property
    def save_pending(self) -> bool:
        return self._save_call.pending

    @property
    def clear_armed(self) -> bool:
        return self._clear_armed

    @property
    def closed(self) -> bool:
        return self._closed

    def is_in_cart(self, item_id: Any) -> bool:
        return self.get_item(item_id) is not None

    def quantity_of(self, item_id: Any) -> int:
        item = self.get_item(item_id)
        return item.quantity if item else 0

    def get_item(self, item_id: Any) -> CartLineItem | None:
        if not is_valid_item_id(item_id):
            return None
        return self._cart.get(item_id)

    def totals(self) -> CartTotals:
        return calc_totals(self._cart, self._tax_rate)

    # =====================================================
    # ERRORS
    # =====================================================
    def _record_error(self, message: str) -> None:
        self._last_error = message
        self._error_call.schedule()
        logger.error("Cart error: %s", message)

    def clear_error(self) -> None:
        self._error_call.cancel()
        self._last_error = None

    # =====================================================
    # PERSISTENCE
    # =====================================================
    def _mark_dirty(self) -> None:
        if self._closed:
            logger.warning("Cart engine is closed; change will not be persisted")
            return
        if not self._save_call.schedule():
            # no event loop to defer on: write through
            self._write_snapshot()

    def _write_snapshot(self) -> bool:
        if self._persistence.save(self._cart):
            return True
        reason = self._persistence.last_failure or "storage unavailable"
        self._record_error(PersistenceError(f"Could not save cart: {reason}").message)
        return False

    def flush(self) -> bool:
        """Write a pending snapshot now. Returns False only if that write failed."""
        if not self._save_call.cancel():
            return True
        return self._write_snapshot()

    def close(self) -> None:
        """Final flush, then cancel every timer owned by the engine."""
        if self._closed:
            return
        self.flush()
        self._error_call.cancel()
        self._confirm_call.cancel()
        self._clear_armed = False
        self._closed = True
        logger.info("Cart engine closed")

    # =====================================================
    # COMMANDS
    # =====================================================
    def add_item(self, product: Any, quantity: int = 1) -> bool:
        """Add ``quantity`` units of ``product``, merging with an existing line.

        Growth beyond ``max_quantity`` is clamped silently.
        """
        try:
            parsed = parse_product(product)
            _validate_quantity(quantity)
        except ValidationError as exc:
            self._record_error(exc.message)
            raise

        self.clear_error()
        existing = self._cart.get(parsed.id)
        if existing:
            new_quantity = min(existing.quantity + quantity, self._max_quantity)
            self._cart.put(existing.with_quantity(new_quantity))
            logger.info(
                "Product %s already in cart, quantity %s -> %s", parsed.id, existing.quantity, new_quantity
            )
        else:
            self._cart.put(make_line_item(parsed, min(quantity, self._max_quantity)))
            logger.info("Added product %s to cart", parsed.id)

        self._mark_dirty()
        return True

    def remove_item(self, item_id: Any) -> bool:
        try:
            _validate_item_id(item_id)
        except ValidationError as exc:
            self._record_error(exc.message)
            raise

        if not self._cart.remove(item_id):
            logger.debug(NotFoundError(item_id).message)
            return False

        self.clear_error()
        logger.info("Removed product %s from cart", item_id)
        self._mark_dirty()
        return True

    def set_quantity(self, item_id: Any, quantity: int) -> bool:
        """Set a line's quantity; 0 removes the line, values above the cap are clamped."""
        try:
            _validate_item_id(item_id)
            _validate_quantity(quantity, allow_zero=True)
        except ValidationError as exc:
            self._record_error(exc.message)
            raise

        if quantity == 0:
            return self.remove_item(item_id)

        existing = self._cart.get(item_id)
        if existing is None:
            logger.debug(NotFoundError(item_id).message)
            return False

        self.clear_error()
        new_quantity = min(quantity, self._max_quantity)
        if new_quantity != existing.quantity:
            self._cart.put(existing.with_quantity(new_quantity))
            self._mark_dirty()
        return True

    def increment_quantity(self, item_id: Any) -> bool:
        try:
            _validate_item_id(item_id)
        except ValidationError as exc:
            self._record_error(exc.message)
            raise

        existing = self._cart.get(item_id)
        if existing is None:
            return False
        return self.set_quantity(item_id, existing.quantity + 1)

    def decrement_quantity(self, item_id: Any) -> bool:
        """Decrease by one; a line at quantity 1 is removed."""
        try:
            _validate_item_id(item_id)
        except ValidationError as exc:
            self._record_error(exc.message)
            raise

        existing = self._cart.get(item_id)
        if existing is None:
            return False
        return self.set_quantity(item_id, existing.quantity - 1)

    def clear(self) -> bool:
        self.clear_error()
        self._disarm_clear()
        self._cart.clear()
        logger.info("Cart cleared")
        self._mark_dirty()
        return True

    def request_clear(self) -> bool:
        """Two-step clear: the first call arms, a second call within the window clears."""
        if self._clear_armed:
            return self.clear()
        self._clear_armed = True
        self._confirm_call.schedule()
        return False

    def _disarm_clear(self) -> None:
        self._confirm_call.cancel()
        self._clear_armed = False
