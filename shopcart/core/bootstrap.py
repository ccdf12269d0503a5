"""Wiring of storage, persistence and engine from configuration."""
from __future__ import annotations

import logging

from shopcart.integrations.cart_persistence import CartPersistence
from shopcart.integrations.catalog_client import CatalogClient
from shopcart.integrations.storage_backends import FileStore, KeyValueStore, MemoryStore, RedisStore
from shopcart.services.cart_engine import CartEngine

from .config import Settings
from .exceptions import ConfigurationException
from .logging_config import setup_logging
from .scheduling import Scheduler

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    setup_logging(settings.log_level)


def create_store(settings: Settings) -> KeyValueStore:
    backend = settings.storage.backend
    if backend == "redis":
        if not settings.storage.redis_url:
            raise ConfigurationException("Redis storage requires REDIS_URL")
        logger.info("Using Redis for cart storage")
        return RedisStore(settings.storage.redis_url)
    if backend == "file":
        logger.info("Using file storage in %s", settings.storage.directory)
        return FileStore(settings.storage.directory)
    if backend == "memory":
        logger.warning("Using in-memory cart storage, cart will be LOST on restart")
        return MemoryStore()
    raise ConfigurationException(f"Unknown storage backend: {backend}")


def build_cart_engine(
    settings: Settings,
    scheduler: Scheduler | None = None,
    store: KeyValueStore | None = None,
) -> CartEngine:
    """Create a cart engine for one session from configuration."""
    persistence = CartPersistence(
        store or create_store(settings),
        key=settings.storage.key,
        max_quantity=settings.max_quantity,
    )
    return CartEngine(
        persistence,
        scheduler,
        max_quantity=settings.max_quantity,
        tax_rate=settings.tax_rate,
        debounce_seconds=settings.debounce_seconds,
        error_timeout_seconds=settings.error_timeout_seconds,
        clear_confirm_seconds=settings.clear_confirm_seconds,
    )


def build_catalog_client(settings: Settings) -> CatalogClient:
    return CatalogClient(settings.catalog_url, timeout=settings.catalog_timeout)
