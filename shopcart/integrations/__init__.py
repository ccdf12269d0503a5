"""Integrations package - storage backends, persistence and catalog."""

from shopcart.integrations.cart_persistence import CartPersistence
from shopcart.integrations.catalog_client import CatalogClient
from shopcart.integrations.storage_backends import FileStore, KeyValueStore, MemoryStore, RedisStore

__all__ = [
    "CartPersistence",
    "CatalogClient",
    "FileStore",
    "KeyValueStore",
    "MemoryStore",
    "RedisStore",
]
