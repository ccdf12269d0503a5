"""
Pydantic models for catalog products and cart line items.

These models are the single validation gate for everything that enters the
cart, whether it comes from a caller or from a stored snapshot:
- ``id`` is required and must be a non-empty string or a non-zero integer
- ``price`` must be a finite, non-negative number (no numeric strings)
- display metadata is kept verbatim, unknown catalog fields are preserved
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from shopcart.core.exceptions import ValidationError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_item_id(value: Any) -> bool:
    """True for a non-empty string or a non-zero integer (booleans excluded)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return bool(value.strip())
    return False


class Rating(BaseModel):
    """Catalog rating block ``{rate, count}``."""

    model_config = ConfigDict(extra="allow", frozen=True)

    rate: Optional[float] = None
    count: Optional[int] = None


class Product(BaseModel):
    """Read-only product record as supplied by the catalog."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    id: Union[int, str]
    price: float
    title: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    rating: Optional[Rating] = None

    @field_validator("id", mode="before")
    @classmethod
    def id_must_be_present(cls, v: Any) -> Any:
        if v is not None and not isinstance(v, (bool, int, str)):
            raise ValueError("product ID must be a string or an integer")
        if not is_valid_item_id(v):
            raise ValueError("product must have an ID")
        return v

    @field_validator("price", mode="before")
    @classmethod
    def price_must_be_valid(cls, v: Any) -> Any:
        if isinstance(v, bool) or not isinstance(v, (int, float, Decimal)):
            raise ValueError("product must have a numeric price")
        if isinstance(v, Decimal):
            if not v.is_finite():
                raise ValueError("price must be finite")
            v = float(v)
        if isinstance(v, float) and not math.isfinite(v):
            raise ValueError("price must be finite")
        if v < 0:
            raise ValueError("price must not be negative")
        return v

    @property
    def unit_price(self) -> Decimal:
        """Price as Decimal for exact arithmetic."""
        return Decimal(str(self.price))


class CartLineItem(Product):
    """Product snapshot plus cart-specific fields."""

    quantity: int = Field(..., ge=1)
    added_at: datetime = Field(default_factory=_utcnow, alias="addedAt")

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_must_be_number(cls, v: Any) -> Any:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("quantity must be a number")
        return v

    @field_validator("added_at")
    @classmethod
    def added_at_is_aware(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def with_quantity(self, quantity: int) -> CartLineItem:
        return self.model_copy(update={"quantity": quantity})

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict in the stored snapshot format."""
        return self.model_dump(mode="json", by_alias=True)


def _error_message(exc: PydanticValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "product"
    message = str(first.get("msg", "invalid value"))
    return f"Invalid {location}: {message.removeprefix('Value error, ')}"


def parse_product(data: Any) -> Product:
    """Validate a catalog record.

    Raises:
        ValidationError: missing id, bad price or not a mapping
    """
    if isinstance(data, Product):
        return data
    if not isinstance(data, Mapping):
        raise ValidationError("Product must be a mapping")
    try:
        return Product.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(_error_message(exc)) from exc


def parse_line_item(data: Any) -> CartLineItem:
    """Validate one stored cart line item."""
    if not isinstance(data, Mapping):
        raise ValidationError("Line item must be a mapping")
    try:
        return CartLineItem.model_validate(dict(data))
    except PydanticValidationError as exc:
        raise ValidationError(_error_message(exc)) from exc


def make_line_item(product: Product, quantity: int) -> CartLineItem:
    """Snapshot ``product`` into a new line item stamped with the current time."""
    fields = product.model_dump(by_alias=True)
    fields.pop("addedAt", None)
    fields.pop("quantity", None)
    return CartLineItem.model_validate({**fields, "quantity": quantity, "addedAt": _utcnow()})
