"""
Per-key mutual exclusion for producer runs.

Callers resolving the same key in one process take turns; whoever comes
second re-checks freshness and normally finds the artifact already written.
"""

import threading
from contextlib import contextmanager
from typing import Dict, Generator


class _KeyLock:
    __slots__ = ("lock", "waiters")

    def __init__(self):
        self.lock = threading.Lock()
        self.waiters = 0


class SingleFlight:
    """Registry of per-key locks, dropped once nobody holds or waits on them."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, _KeyLock] = {}

    @contextmanager
    def lock(self, key: str) -> Generator[None, None, None]:
        """Hold the lock for ``key`` for the duration of the block."""
        with self._guard:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _KeyLock()
            entry.waiters += 1

        entry.lock.acquire()
        try:
            yield
        finally:
            entry.lock.release()
            with self._guard:
                entry.waiters -= 1
                if entry.waiters == 0:
                    del self._locks[key]

    def active_keys(self) -> list[str]:
        """Keys currently held or awaited."""
        with self._guard:
            return list(self._locks)
