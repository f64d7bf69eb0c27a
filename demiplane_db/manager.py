"""Coordination of a dedicated client pool with a pool shared between owners."""

from __future__ import annotations

import threading
from typing import Any

from demiplane_db.pool import DatabasePool

DEFAULT_AWAITING_DURATION = 1.2


class PoolManager:
    """Hands out clients from a dedicated pool first and a shared pool second.

    ``awaiting_duration`` is the number of seconds a caller waits for a free
    client before the manager moves on to the next source.
    """

    def __init__(
        self,
        dedicated_pool: DatabasePool[Any],
        shared_pool: DatabasePool[Any],
        awaiting_duration: float = DEFAULT_AWAITING_DURATION,
    ) -> None:
        self.dedicated_pool = dedicated_pool
        self.shared_pool = shared_pool
        self.awaiting_duration = awaiting_duration
        self._high_load = threading.Event()

    @property
    def awaiting_duration(self) -> float:
        return self._awaiting_duration

    @awaiting_duration.setter
    def awaiting_duration(self, seconds: float) -> None:
        seconds = float(seconds)
        if seconds < 0:
            raise ValueError("Awaiting duration cannot be negative")
        self._awaiting_duration = seconds

    @property
    def high_load(self) -> bool:
        return self._high_load.is_set()

    @high_load.setter
    def high_load(self, flag: bool) -> None:
        if flag:
            self._high_load.set()
        else:
            self._high_load.clear()

    def acquire(self) -> Any | None:
        """Take a free client from the dedicated pool, else wait briefly on the shared one.

        Returns None when neither pool yields a client in time.
        """
        client = self.dedicated_pool.acquire()
        if client is not None:
            return client
        return self.shared_pool.acquire(self._awaiting_duration)

    def safe_acquire(self) -> Any:
        """Take a client, blocking on the dedicated pool if both are exhausted."""
        client = self.dedicated_pool.acquire(self._awaiting_duration)
        if client is not None:
            return client
        client = self.shared_pool.acquire(self._awaiting_duration)
        if client is not None:
            return client
        return self.dedicated_pool.safe_acquire()

    def release(self, obj: Any) -> Any | None:
        """Return a client to a pool with room; hand it back if both are full."""
        if self.dedicated_pool.release(obj):
            return None
        if self.shared_pool.release(obj):
            return None
        return obj

    def safe_release(self, obj: Any) -> None:
        """Return a client, waiting on the dedicated pool if both are full."""
        if self.dedicated_pool.release(obj):
            return
        if self.shared_pool.release(obj):
            return
        self.dedicated_pool.safe_release(obj)

    def check_shared_overflow(self) -> bool:
        """Whether the shared pool holds more than twice its capacity."""
        return self.shared_pool.current_volume() > 2 * self.shared_pool.capacity

    def check_shared_exhaustion(self) -> bool:
        return self.shared_pool.empty()

    def check_and_notify_shared_overflow(self) -> bool:
        return self.check_shared_overflow()

    def check_and_notify_shared_exhaustion(self) -> bool:
        return self.check_shared_exhaustion()

    def is_under_pressure(self) -> bool:
        return self.high_load

    def graceful_shutdown(self) -> None:
        """Disconnect every pooled client; errors propagate."""
        self.dedicated_pool.graceful_shutdown()
        self.shared_pool.graceful_shutdown()

    def safe_kill(self) -> None:
        """Disconnect every pooled client, logging rather than raising failures."""
        self.dedicated_pool.safe_kill()
        self.shared_pool.safe_kill()

    def __enter__(self) -> PoolManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.safe_kill()