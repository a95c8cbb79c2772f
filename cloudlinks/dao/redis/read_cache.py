"""Process-wide read cache for link records

Lambda containers are reused between invocations, so records read with a
`cache_ttl` are kept in memory and served without a Redis round trip until
they are `cache_ttl` seconds old. Writes made through the DAO in the same
container drop the cached entry.

Only found records are cached; a miss always goes to Redis.
"""

import threading
import time

from cloudlinks.models import LinkRecord


class ReadCache:
    """Thread-safe key -> LinkRecord cache with per-entry expiry

    Example:
        >>> cache = ReadCache()
        >>> cache.store('link:abc', link, ttl=60)
        >>> cache.lookup('link:abc')
        LinkRecord(slug='abc', ...)
    """

    def __init__(self, max_entries: int = 1024):
        self.max_entries = max_entries
        self._entries: dict[str, tuple[float, LinkRecord]] = {}
        self._lock = threading.Lock()

    def lookup(self, key: str) -> LinkRecord | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, link = entry
            if time.monotonic() >= expires_at:
                del self._entries[key]
                return None
            return link

    def store(self, key: str, link: LinkRecord, ttl: int) -> None:
        with self._lock:
            if len(self._entries) >= self.max_entries:
                self._evict()
            self._entries[key] = (time.monotonic() + ttl, link)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _evict(self) -> None:
        now = time.monotonic()
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        # Still full: drop the oldest insertion
        if len(self._entries) >= self.max_entries:
            del self._entries[next(iter(self._entries))]


# Shared by every DAO instance in this process
SHARED_READ_CACHE = ReadCache()
