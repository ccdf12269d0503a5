"""Ordered, id-keyed collection of cart line items."""
from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

from .models.product import CartLineItem


class Cart:
    """Insertion-ordered line items with at most one line per product id.

    Line items are immutable; replacing a line keeps its position.
    """

    def __init__(self, items: Iterable[CartLineItem] = ()):
        self._lines: dict[Any, CartLineItem] = {}
        for item in items:
            # first occurrence wins
            self._lines.setdefault(item.id, item)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[CartLineItem]:
        return iter(tuple(self._lines.values()))

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._lines

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cart):
            return NotImplemented
        return self.items == other.items

    def __repr__(self) -> str:
        return f"Cart({list(self._lines.values())!r})"

    @property
    def items(self) -> tuple[CartLineItem, ...]:
        return tuple(self._lines.values())

    def is_empty(self) -> bool:
        return not self._lines

    def get(self, item_id: Any) -> CartLineItem | None:
        return self._lines.get(item_id)

    def put(self, item: CartLineItem) -> None:
        self._lines[item.id] = item

    def remove(self, item_id: Any) -> bool:
        return self._lines.pop(item_id, None) is not None

    def clear(self) -> None:
        self._lines.clear()

    def to_payload(self) -> list[dict[str, Any]]:
        return [item.to_payload() for item in self._lines.values()]
