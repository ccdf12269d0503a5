"""Custom exceptions for the cart engine."""
from __future__ import annotations

from typing import Any


class CartException(Exception):
    """Base exception for all cart errors."""

    def __init__(self, message: str, *args: object) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationError(CartException):
    """Malformed product or quantity argument."""

    pass


class NotFoundError(CartException):
    """Line item not found in the cart.

    Mutations report this condition as a ``False`` return value rather than
    raising; the class exists so callers can build the message consistently.
    """

    def __init__(self, item_id: Any) -> None:
        super().__init__(f"Product with ID {item_id} is not in the cart")
        self.item_id = item_id


class PersistenceError(CartException):
    """Cart snapshot could not be written."""

    pass


class StorageBackendError(PersistenceError):
    """Key-value backend read/write failure."""

    pass


class CatalogError(CartException):
    """Catalog API request failed."""

    pass


class ConfigurationException(CartException):
    """Configuration errors."""

    pass
