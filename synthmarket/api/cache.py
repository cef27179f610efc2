"""In-memory TTL cache for the HTTP layer.

Holds values such as the latest generated price per symbol.  Entries expire
after their TTL and the oldest entry is evicted once ``max_entries`` is
reached.  The engine never reads from it.
"""

from __future__ import annotations

import asyncio
import time
from collections import OrderedDict
from typing import Any, Callable

from synthmarket.config import settings


class TTLCache:
    """Key -> value store with per-entry expiry.

    Safe for concurrent coroutines via asyncio.Lock.

    Attributes:
        default_ttl_seconds: TTL applied when ``set`` is called without one.
        max_entries: Capacity; the oldest entry is evicted beyond it.
    """

    def __init__(
        self,
        default_ttl_seconds: float = 300,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl_seconds = default_ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        # key -> (expires_at, value), in insertion order
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()
        self._lock = asyncio.Lock()

    def _purge(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]

    async def get(self, key: str) -> Any | None:
        """Return the cached value, or ``None`` if missing or expired."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                return None
            return value

    async def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self.default_ttl_seconds if ttl_seconds is None else ttl_seconds
        async with self._lock:
            now = self._clock()
            self._entries.pop(key, None)
            if len(self._entries) >= self.max_entries:
                self._purge(now)
            while len(self._entries) >= self.max_entries:
                self._entries.popitem(last=False)
            self._entries[key] = (now + ttl, value)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._entries.pop(key, None)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    async def size(self) -> int:
        """Number of live (unexpired) entries."""
        async with self._lock:
            self._purge(self._clock())
            return len(self._entries)


# Module-level singleton used by the HTTP handlers.
latest_price_cache = TTLCache(
    default_ttl_seconds=settings.latest_cache_ttl_seconds,
    max_entries=settings.latest_cache_max_entries,
)
