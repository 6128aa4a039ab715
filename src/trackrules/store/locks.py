"""Per-user lock registry.

Loads and saves for the same user must not interleave, otherwise two
concurrent read-modify-write cycles can lose an update. Each user key gets
its own asyncio.Lock; different users never wait on each other.
"""

from __future__ import annotations

import asyncio
import weakref


class UserLockRegistry:
    """Hands out one asyncio.Lock per user key.

    Locks are held weakly: a lock lives while some task holds or waits on
    it and is dropped afterwards, so the registry does not grow with every
    user ever seen. The registry must be used from a single event loop.
    """

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def get(self, key: str) -> asyncio.Lock:
        """Return the lock for key, creating it when none is alive."""
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)
