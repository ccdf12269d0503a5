"""Environment-driven configuration objects for the cart engine."""
from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv

from .constants import (
    CART_STORAGE_KEY,
    CATALOG_TIMEOUT_SECONDS,
    CLEAR_CONFIRM_SECONDS,
    DEFAULT_CATALOG_URL,
    DEFAULT_STORAGE_DIR,
    ERROR_CLEAR_SECONDS,
    MAX_QUANTITY,
    SAVE_DEBOUNCE_SECONDS,
    TAX_RATE,
)
from .exceptions import ConfigurationException

STORAGE_BACKENDS = ("memory", "file", "redis")


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationException(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigurationException(f"{name} must not be negative")
    return value


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationException(f"{name} must be an integer, got {raw!r}") from exc


def _get_decimal(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise ConfigurationException(f"{name} must be a decimal, got {raw!r}") from exc
    if not value.is_finite() or value < 0:
        raise ConfigurationException(f"{name} must be a non-negative decimal")
    return value


@dataclass(slots=True)
class StorageConfig:
    backend: str
    directory: str
    redis_url: str | None
    key: str


@dataclass(slots=True)
class Settings:
    storage: StorageConfig
    max_quantity: int
    tax_rate: Decimal
    debounce_seconds: float
    error_timeout_seconds: float
    clear_confirm_seconds: float
    catalog_url: str
    catalog_timeout: float
    log_level: str

    @property
    def redis_url(self) -> str | None:
        """Shortcut for the storage Redis URL."""
        return self.storage.redis_url


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    backend = os.getenv("CART_STORAGE_BACKEND", "file").strip().lower()
    if backend not in STORAGE_BACKENDS:
        raise ConfigurationException(
            f"CART_STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}, got {backend!r}"
        )

    redis_url = os.getenv("REDIS_URL") or None
    if backend == "redis" and not redis_url:
        raise ConfigurationException("CART_STORAGE_BACKEND=redis requires REDIS_URL")

    max_quantity = _get_int("CART_MAX_QUANTITY", MAX_QUANTITY)
    if max_quantity < 1:
        raise ConfigurationException("CART_MAX_QUANTITY must be at least 1")

    storage = StorageConfig(
        backend=backend,
        directory=os.getenv("CART_STORAGE_DIR", DEFAULT_STORAGE_DIR),
        redis_url=redis_url,
        key=os.getenv("CART_STORAGE_KEY", CART_STORAGE_KEY),
    )

    return Settings(
        storage=storage,
        max_quantity=max_quantity,
        tax_rate=_get_decimal("CART_TAX_RATE", TAX_RATE),
        debounce_seconds=_get_float("CART_DEBOUNCE_SECONDS", SAVE_DEBOUNCE_SECONDS),
        error_timeout_seconds=_get_float("CART_ERROR_TIMEOUT_SECONDS", ERROR_CLEAR_SECONDS),
        clear_confirm_seconds=_get_float("CART_CLEAR_CONFIRM_SECONDS", CLEAR_CONFIRM_SECONDS),
        catalog_url=os.getenv("CATALOG_API_URL", DEFAULT_CATALOG_URL).rstrip("/"),
        catalog_timeout=_get_float("CATALOG_TIMEOUT", CATALOG_TIMEOUT_SECONDS),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
