"""Per-symbol mutual exclusion."""

import threading
from contextlib import contextmanager
from typing import Iterator


class SymbolLocks:
    """Registry of one exclusive lock per symbol.

    Mutations of the same symbol serialize on its lock; different symbols
    never contend. Locks are created on first use and kept for the life of
    the registry.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, symbol: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(symbol)
            if lock is None:
                lock = self._locks[symbol] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, symbol: str) -> Iterator[None]:
        """Hold the symbol's lock for the duration of the block."""
        lock = self.lock_for(symbol)
        with lock:
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
