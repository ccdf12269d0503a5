"""Cancellable deferred callbacks.

The engine never sleeps: debounced saves, error auto-clear and the clear
confirmation window are all modeled as callbacks scheduled on the event loop
and cancelled explicitly when superseded or when the engine is closed.
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(ABC):
    """Abstract deferred-call scheduler."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        """Run ``callback`` after ``delay`` seconds.

        Raises:
            RuntimeError: if the scheduler cannot defer work right now
        """
        pass


class AsyncioScheduler(Scheduler):
    """Schedules callbacks on an asyncio event loop.

    Without an explicit loop the currently running loop is used, so an
    engine created outside a coroutine still debounces once it is driven
    from one.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        if loop.is_closed():
            raise RuntimeError("event loop is closed")
        return loop.call_later(delay, callback)


class DeferredCall:
    """Single-slot deferred callback.

    Scheduling again cancels the pending call first, so a burst of
    ``schedule()`` calls collapses into one invocation ``delay`` seconds
    after the last of them (debounce).
    """

    def __init__(self, scheduler: Scheduler, delay: float, callback: Callable[[], Any], name: str = ""):
        self._scheduler = scheduler
        self._delay = delay
        self._callback = callback
        self._name = name or getattr(callback, "__name__", "deferred")
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def delay(self) -> float:
        return self._delay

    def schedule(self) -> bool:
        """(Re)start the timer. Returns False when no timer could be started."""
        self.cancel()
        try:
            self._handle = self._scheduler.call_later(self._delay, self._fire)
        except RuntimeError as exc:
            logger.debug("Cannot schedule %s: %s", self._name, exc)
            self._handle = None
            return False
        return True

    def cancel(self) -> bool:
        """Drop the pending call. Returns True if one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        return True

    def flush(self) -> bool:
        """Run the pending call now instead of waiting for the timer."""
        if not self.cancel():
            return False
        self._callback()
        return True

    def _fire(self) -> None:
        self._handle = None
        self._callback()
