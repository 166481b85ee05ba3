"""Per-POI mutual exclusion for booking writes."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class PoiLockRegistry:
    """One ``asyncio.Lock`` per POI id, created on first use.

    Serializes check-then-write sequences for the same POI within this
    process. Locks for idle POIs are dropped once nobody holds or waits on
    them.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, poi_id: str) -> AsyncIterator[None]:
        lock = self._locks.get(poi_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[poi_id] = lock
        self._users[poi_id] = self._users.get(poi_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[poi_id] -= 1
            if self._users[poi_id] == 0:
                del self._users[poi_id]
                del self._locks[poi_id]

    def is_locked(self, poi_id: str) -> bool:
        lock = self._locks.get(poi_id)
        return lock is not None and lock.locked()

    def clear(self) -> None:
        self._locks.clear()
        self._users.clear()


poi_locks = PoiLockRegistry()
