"""Tests for shopcart.core exceptions and logging setup."""
from __future__ import annotations

import logging

from shopcart.core.exceptions import (
    CartException,
    CatalogError,
    NotFoundError,
    PersistenceError,
    StorageBackendError,
    ValidationError,
)
from shopcart.core.logging_config import LOGGER_NAME, setup_logging


class TestExceptions:
    """Test custom exception classes."""

    def test_base_exception(self):
        exc = CartException("test message")
        assert str(exc) == "test message"
        assert exc.message == "test message"

    def test_not_found(self):
        exc = NotFoundError(42)
        assert exc.item_id == 42
        assert "42" in exc.message

    def test_hierarchy(self):
        assert issubclass(ValidationError, CartException)
        assert issubclass(StorageBackendError, PersistenceError)
        assert issubclass(CatalogError, CartException)


class TestLogging:
    def test_setup_logging_is_idempotent(self):
        logger = setup_logging("debug")
        handlers = list(logger.handlers)
        setup_logging("warning")

        assert logger.name == LOGGER_NAME
        assert logger.handlers == handlers
        assert logger.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logging("nonsense").level == logging.INFO
