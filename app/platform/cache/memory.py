import asyncio
import copy
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from app.platform.cache.base import ResultCache


@dataclass
class _Entry:
    value: dict[str, Any]
    expires_at: float


class InMemoryCache(ResultCache):
    """Process-local TTL cache.

    `clock` must be monotonic; tests pass a fake one to move time forward.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Optional[dict[str, Any]]:
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                return None
            return copy.deepcopy(entry.value)

    async def set(self, key: str, value: dict[str, Any], ttl: int) -> None:
        async with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._entries[key] = _Entry(copy.deepcopy(value), now + ttl)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if entry.expires_at <= now]
        for key in expired:
            del self._entries[key]

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for entry in self._entries.values() if entry.expires_at > now)
