"""Key-value backends holding serialized cart snapshots.

Every backend stores opaque strings under string keys and raises
``StorageBackendError`` for any I/O failure, so the persistence adapter has a
single failure type to handle.
"""
from __future__ import annotations

import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

import redis
from redis.exceptions import RedisError

from shopcart.core.exceptions import StorageBackendError

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStore(ABC):
    """Abstract single-value-per-key store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value or None if the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Overwrite the value stored under key."""
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Remove key. Returns True if it existed."""
        pass


class MemoryStore(KeyValueStore):
    """Process-local store. Contents are lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None


class FileStore(KeyValueStore):
    """Durable store keeping one file per key inside a directory.

    Writes go to a temporary file that atomically replaces the previous one,
    so a crash mid-write never leaves a truncated snapshot behind.
    """

    def __init__(self, directory: str | os.PathLike[str]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageBackendError(f"Invalid storage key: {key!r}")
        return self._directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageBackendError(f"Failed to read {path}: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_name = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self._directory, prefix=f".{key}.", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(value)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageBackendError(f"Failed to write {path}: {exc}") from exc

    def delete(self, key: str) -> bool:
        path = self._path(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageBackendError(f"Failed to delete {path}: {exc}") from exc


class RedisStore(KeyValueStore):
    """Store backed by Redis; optional TTL refreshed on every write."""

    def __init__(self, redis_url: str, ttl_seconds: int | None = None, prefix: str = "shopcart:"):
        self._ttl = ttl_seconds
        self._prefix = prefix
        try:
            self._client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
        except (RedisError, ValueError) as exc:
            raise StorageBackendError(f"Invalid Redis configuration: {exc}") from exc
        logger.info("Redis cart storage enabled")

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except RedisError:
            return False

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(self._key(key))
        except (RedisError, UnicodeDecodeError) as exc:
            raise StorageBackendError(f"Redis GET failed: {exc}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            if self._ttl:
                self._client.setex(self._key(key), self._ttl, value)
            else:
                self._client.set(self._key(key), value)
        except RedisError as exc:
            raise StorageBackendError(f"Redis SET failed: {exc}") from exc

    def delete(self, key: str) -> bool:
        try:
            return bool(self._client.delete(self._key(key)))
        except RedisError as exc:
            raise StorageBackendError(f"Redis DEL failed: {exc}") from exc
