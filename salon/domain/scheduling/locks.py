"""
In-process keyed locks.

Every calendar mutation (booking, move, resize, block, status change) runs as a
read-check-write unit while holding the lock of each professional/day it touches.
Availability queries are plain reads and never take these locks. Package credits
are taken under a per-package lock so two bookings cannot spend the same credit.
"""

import logging
from contextlib import contextmanager
from datetime import date
from threading import Lock
from typing import Hashable, Iterable

from ...config import LOCK_TIMEOUT_SECONDS
from ...shared.errors import LockTimeoutError

logger = logging.getLogger(__name__)

DayKey = tuple[str, date]


class _Entry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = Lock()
        self.users = 0


class KeyedLockRegistry:
    """
    One lock per key, created on first use and dropped as soon as no caller
    holds or waits for it, so the registry only ever contains keys in use.
    """

    def __init__(self, name: str, timeout: float = LOCK_TIMEOUT_SECONDS):
        self.name = name
        self.timeout = timeout
        self._locks: dict[Hashable, _Entry] = {}
        self._registry_lock = Lock()

    def __len__(self) -> int:
        with self._registry_lock:
            return len(self._locks)

    def _checkout(self, key) -> Lock:
        with self._registry_lock:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _Entry()
            entry.users += 1
            return entry.lock

    def _checkin(self, key) -> None:
        with self._registry_lock:
            entry = self._locks[key]
            entry.users -= 1
            if entry.users == 0:
                del self._locks[key]

    @contextmanager
    def hold(self, keys: Iterable[tuple]):
        """
        Acquire the locks for all keys, in a stable order so two writers that
        touch the same pair of keys cannot deadlock.
        """
        ordered = sorted(set(keys), key=lambda k: tuple(str(part) for part in k))
        acquired: list = []
        try:
            for key in ordered:
                lock = self._checkout(key)
                if not lock.acquire(timeout=self.timeout):
                    self._checkin(key)
                    label = " ".join(str(part) for part in key)
                    logger.warning(f"⏱️ Timed out waiting for {self.name} lock {label}")
                    raise LockTimeoutError(
                        f"The {self.name} is busy, please try again", resource=label
                    )
                acquired.append((key, lock))
            yield
        finally:
            for key, lock in reversed(acquired):
                lock.release()
                self._checkin(key)


day_locks = KeyedLockRegistry("calendar")
package_locks = KeyedLockRegistry("package")
