"""Shared pytest fixtures for cart tests."""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest

from shopcart.core.exceptions import StorageBackendError
from shopcart.core.scheduling import Scheduler
from shopcart.integrations.cart_persistence import CartPersistence
from shopcart.integrations.storage_backends import MemoryStore
from shopcart.services.cart_engine import CartEngine


@dataclass
class FakeHandle:
    when: float
    callback: Callable[[], Any]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class FakeScheduler(Scheduler):
    """Virtual clock: callbacks run only when the test advances time."""

    now: float = 0.0
    handles: list[FakeHandle] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callable[[], Any]) -> FakeHandle:
        handle = FakeHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = sorted(
                (h for h in self.handles if not h.cancelled and h.when <= target),
                key=lambda h: h.when,
            )
            if not due:
                break
            handle = due[0]
            handle.cancelled = True
            self.now = handle.when
            handle.callback()
        self.now = target


class RecordingStore(MemoryStore):
    """Memory store that records every write and can be told to fail."""

    def __init__(self, initial: dict[str, str] | None = None):
        super().__init__(initial)
        self.writes: list[str] = []
        self.fail_writes = False
        self.fail_reads = False

    def get(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageBackendError("read failed")
        return super().get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise StorageBackendError("quota exceeded")
        self.writes.append(value)
        super().set(key, value)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def persistence(store: RecordingStore) -> CartPersistence:
    return CartPersistence(store)


@pytest.fixture
def engine(persistence: CartPersistence, scheduler: FakeScheduler) -> CartEngine:
    return CartEngine(persistence, scheduler)


@pytest.fixture
def shirt() -> dict[str, Any]:
    return {
        "id": 1,
        "title": "Fjallraven - Foldsack No. 1 Backpack",
        "price": 10,
        "image": "https://fakestoreapi.com/img/81fPKd-2AYL._AC_SL1500_.jpg",
        "category": "men's clothing",
        "rating": {"rate": 3.9, "count": 120},
    }


@pytest.fixture
def mug() -> dict[str, Any]:
    return {"id": 2, "title": "Mug", "price": 5, "category": "kitchen"}
