"""Single-slot persistence of the serialized cart."""
from __future__ import annotations

import json
import logging
from typing import Any

from shopcart.core.cart_math import clamp_quantity
from shopcart.core.constants import CART_STORAGE_KEY, MAX_QUANTITY
from shopcart.core.exceptions import StorageBackendError, ValidationError
from shopcart.domain.cart import Cart
from shopcart.domain.models.product import CartLineItem, parse_line_item

from .storage_backends import KeyValueStore

logger = logging.getLogger(__name__)


class CartPersistence:
    """Loads and saves one cart snapshot under a fixed key.

    Neither operation raises: reads heal themselves by dropping whatever does
    not validate, writes report failure as ``False``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = CART_STORAGE_KEY,
        max_quantity: int = MAX_QUANTITY,
    ):
        self._store = store
        self._key = key
        self._max_quantity = max_quantity
        self.last_failure: str | None = None

    @property
    def key(self) -> str:
        return self._key

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def _read_raw(self) -> Any:
        try:
            raw = self._store.get(self._key)
        except StorageBackendError as exc:
            logger.warning("Error loading cart from storage: %s", exc)
            return None
        if not raw:
            return None
        try:
            return json.loads(raw)
        except (ValueError, RecursionError) as exc:
            logger.warning("Stored cart is not valid JSON, ignoring it: %s", exc)
            return None

    def _parse_items(self, data: list[Any]) -> list[CartLineItem]:
        items: list[CartLineItem] = []
        for index, raw_item in enumerate(data):
            try:
                item = parse_line_item(raw_item)
            except ValidationError as exc:
                logger.warning("Dropping stored cart item #%s: %s", index, exc.message)
                continue
            if item.quantity > self._max_quantity:
                item = item.with_quantity(clamp_quantity(item.quantity, self._max_quantity))
            items.append(item)
        return items

    def load(self) -> Cart:
        """Return the stored cart, or an empty one if nothing usable is stored."""
        data = self._read_raw()
        if data is None:
            return Cart()
        if not isinstance(data, list):
            logger.warning("Stored cart is not a list (%s), ignoring it", type(data).__name__)
            return Cart()

        cart = Cart(self._parse_items(data))
        logger.debug("Loaded cart with %s line(s) from %r", len(cart), self._key)
        return cart

    def save(self, cart: Cart) -> bool:
        """Overwrite the stored snapshot. Returns False if the write failed."""
        try:
            serialized = json.dumps(cart.to_payload(), ensure_ascii=False)
            self._store.set(self._key, serialized)
        except (StorageBackendError, TypeError, ValueError) as exc:
            self.last_failure = str(exc)
            logger.error("Error saving cart to storage: %s", exc)
            return False
        self.last_failure = None
        logger.debug("Saved cart with %s line(s) to %r", len(cart), self._key)
        return True

    def clear(self) -> bool:
        """Delete the stored snapshot."""
        try:
            self._store.delete(self._key)
        except StorageBackendError as exc:
            logger.error("Error deleting stored cart: %s", exc)
            return False
        return True
