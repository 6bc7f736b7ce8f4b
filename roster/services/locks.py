import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class MemberLocks:
    """
    Per-community-number mutual exclusion.

    Lifecycle transitions on the same member never interleave; transitions on
    different members run freely. Locks are dropped once nobody holds or
    waits on them.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._waiters: dict[str, int] = {}

    @asynccontextmanager
    async def hold(self, community_number: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(community_number, asyncio.Lock())
        self._waiters[community_number] = self._waiters.get(community_number, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[community_number] -= 1
            if self._waiters[community_number] == 0:
                del self._waiters[community_number]
                del self._locks[community_number]

    def is_held(self, community_number: str) -> bool:
        lock = self._locks.get(community_number)
        return lock is not None and lock.locked()


# Held while a new community number is drawn and inserted.
ISSUE_KEY = "issue"
