"""A thread-safe pool of database clients."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from enum import Enum, auto
from typing import Any, Generic, TypeVar

_log = logging.getLogger(__name__)

T = TypeVar("T")

IDLE_PERIOD = 60.0


class AlertType(Enum):
    """Conditions a pool manager may report."""

    SHARED_EXHAUSTION = auto()
    SHARED_OVERFLOW = auto()
    INVALID_CONNECTION = auto()


class _Connection(Generic[T]):
    __slots__ = ("interface", "last_active")

    def __init__(self, interface: T) -> None:
        self.interface = interface
        self.last_active = time.monotonic()

    def is_idle(self, period: float) -> bool:
        return time.monotonic() - self.last_active > period


class DatabasePool(Generic[T]):
    """A bounded pool of client objects, each exposing drop_connect()."""

    def __init__(
        self,
        size: int = 0,
        factory: Callable[..., T] | None = None,
        *args: Any,
        idle_period: float = IDLE_PERIOD,
        **kwargs: Any,
    ) -> None:
        self._lock = threading.RLock()
        self._not_full = threading.Condition(self._lock)
        self._not_empty = threading.Condition(self._lock)
        self._pool: deque[_Connection[T]] = deque()
        self._capacity = 0
        self.idle_period = idle_period
        self.external_lock = threading.Lock()
        if factory is not None:
            self.fill(size, factory, *args, **kwargs)

    def _take_back(self) -> T:
        obj = self._pool.pop().interface
        self._not_full.notify()
        return obj

    def acquire(self, timeout: float | None = None) -> T | None:
        """Take a client; wait up to timeout seconds if given. None if none is free."""
        with self._lock:
            if timeout is not None:
                self._not_empty.wait_for(lambda: bool(self._pool), timeout)
            if not self._pool:
                return None
            return self._take_back()

    def safe_acquire(self) -> T:
        """Take a client, waiting as long as needed."""
        with self._lock:
            self._not_empty.wait_for(lambda: bool(self._pool))
            return self._take_back()

    def release(self, obj: T) -> bool:
        """Return a client; False if the pool is already full."""
        with self._lock:
            if obj is None:
                raise ValueError("Invalid interface.")
            if self.full():
                return False
            self._pool.append(_Connection(obj))
            self._not_empty.notify()
            return True

    def safe_release(self, obj: T) -> None:
        """Return a client, waiting until there is room."""
        with self._lock:
            self._not_full.wait_for(lambda: not self.full())
            self._pool.append(_Connection(obj))
            self._not_empty.notify()

    def fill(self, size: int, factory: Callable[..., T], *args: Any, **kwargs: Any) -> None:
        """Set the capacity to size and add size clients made by factory."""
        with self._lock:
            self._capacity = size
            for _ in range(size):
                obj = factory(*args, **kwargs)
                if not obj:
                    raise RuntimeError(
                        "Factory function failed to create a valid instance."
                    )
                self._pool.append(_Connection(obj))
            self._not_empty.notify_all()

    def graceful_shutdown(self) -> None:
        """Disconnect and drop every pooled client; errors propagate."""
        with self._lock:
            while self._pool:
                self._pool[-1].interface.drop_connect()
                self._pool.pop()
            self._not_full.notify_all()

    def safe_kill(self) -> None:
        """Disconnect and drop every pooled client, logging any failure."""
        with self._lock:
            while self._pool:
                try:
                    self._pool[-1].interface.drop_connect()
                except Exception as exc:  # noqa: BLE001
                    _log.error("Failed to drop connection: %s", exc)
                self._pool.pop()
            self._not_full.notify_all()

    def lend(self) -> T:
        """Take the oldest client, which must have been idle."""
        with self._lock:
            if not self._pool:
                raise RuntimeError("Pool is exhausted.")
            if not self._pool[0].is_idle(self.idle_period):
                raise RuntimeError("Connection is waiting. But not idle")
            obj = self._pool.popleft().interface
            self._not_full.notify()
            return obj

    def has_idle(self) -> bool:
        """Whether the oldest pooled client has been idle long enough to lend."""
        with self._lock:
            return bool(self._pool) and self._pool[0].is_idle(self.idle_period)

    @property
    def capacity(self) -> int:
        with self._lock:
            return self._capacity

    def current_volume(self) -> int:
        with self._lock:
            return len(self._pool)

    def full(self) -> bool:
        with self._lock:
            return len(self._pool) >= self._capacity

    def empty(self) -> bool:
        with self._lock:
            return not self._pool

    def __len__(self) -> int:
        return self.current_volume()

    def __enter__(self) -> DatabasePool[T]:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.safe_kill()