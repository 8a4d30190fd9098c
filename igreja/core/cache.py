"""
Time-to-live cache for frequently read data

Library utility only; the entity access modules always hit the backend.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar
import time
import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass
class CacheEntry:
    data: Any
    timestamp: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.timestamp < self.ttl


class TTLCache:
    """Async read-through cache keyed by string"""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, CacheEntry] = {}
        self._clock = clock

    async def get(self, key: str, fetcher: Callable[[], Awaitable[T]], ttl_minutes: float = 5) -> T:
        """Return the cached value for key, calling fetcher when absent or stale"""
        now = self._clock()
        entry = self._entries.get(key)
        if entry and entry.is_fresh(now):
            return entry.data

        data = await fetcher()
        self._entries[key] = CacheEntry(data=data, timestamp=now, ttl=ttl_minutes * 60)
        logger.debug("Cache filled", key=key, ttl_minutes=ttl_minutes)
        return data

    def clear(self, key: Optional[str] = None):
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def clear_expired(self):
        now = self._clock()
        for key in [k for k, entry in self._entries.items() if not entry.is_fresh(now)]:
            del self._entries[key]

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
