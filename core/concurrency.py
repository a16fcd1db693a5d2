"""
Per-entity locking for the in-memory stores.

Each shared structure hands out one lock per key (vehicle id, alert id,
VIN). Work on different keys never contends; work on the same key is
serialised. Handlers run on FastAPI's thread pool, so these are
`threading` locks rather than asyncio primitives.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Hashable, Iterator

logger = logging.getLogger(__name__)


class KeyedLocks:
    """
    Lazily created lock per key.

    The registry lock only guards the dict of locks and is held for a
    dictionary lookup, never while the caller's critical section runs.
    """

    def __init__(self, name: str = "locks"):
        self.name = name
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._held: int = 0
        self._counter_lock = threading.Lock()

    def lock_for(self, key: Hashable) -> threading.Lock:
        """Return the lock for `key`, creating it on first use."""
        lock = self._locks.get(key)
        if lock is not None:
            return lock
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
                logger.debug(f"{self.name}: created lock for {key!r}")
            return lock

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        """
        Context manager that holds the lock for `key`.

        Usage:
            with locks.hold(vehicle_id):
                sequence.append(reading)
        """
        lock = self.lock_for(key)
        with lock:
            with self._counter_lock:
                self._held += 1
            try:
                yield
            finally:
                with self._counter_lock:
                    self._held -= 1

    def stats(self) -> dict:
        """
        Current lock statistics.

        Returns:
            dict with:
            - name: Which structure the locks protect
            - keys: Number of keys that have a lock
            - held: Locks held right now
        """
        return {
            "name": self.name,
            "keys": len(self._locks),
            "held": self._held,
        }
