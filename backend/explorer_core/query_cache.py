"""In-process query cache for read endpoints: staleness windows, dedup, invalidation.

Keys are tuples with a hierarchical prefix, e.g. ("locations", "list") or
("locations", "detail", "loc-1"); invalidate(("locations",)) marks both stale.

In-flight loads are not cancelled: a load that started before an invalidation
still stores its result when it finishes.
"""
import logging
import threading
import time
from typing import Any, Callable, Hashable, Optional

LOG = logging.getLogger(__name__)

QueryKey = tuple[Hashable, ...]


class _Entry:
    __slots__ = ("value", "updated_at", "last_access", "stale")

    def __init__(self, value: Any, now: float) -> None:
        self.value = value
        self.updated_at = now
        self.last_access = now
        self.stale = False


def location_keys_list() -> QueryKey:
    return ("locations", "list")


def location_keys_detail(location_id: str) -> QueryKey:
    return ("locations", "detail", location_id)


def category_keys_list() -> QueryKey:
    return ("categories", "list")


def product_keys_list() -> QueryKey:
    return ("products", "list")


class QueryCache:
    """
    Thread-safe cache of loader results.
    stale_time: seconds a value is served without reloading.
    gc_time: seconds an unread entry is kept before being dropped.
    """

    def __init__(
        self,
        stale_time: float = 300.0,
        gc_time: float = 600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.stale_time = stale_time
        self.gc_time = gc_time
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[QueryKey, _Entry] = {}
        self._key_locks: dict[QueryKey, threading.Lock] = {}
        # Callers holding or waiting on each key lock; a lock is dropped at zero.
        self._key_users: dict[QueryKey, int] = {}

    def _is_fresh(self, entry: _Entry, now: float, stale_time: float) -> bool:
        return not entry.stale and (now - entry.updated_at) < stale_time

    def _collect(self, now: float) -> None:
        """Drop entries not read within gc_time. Caller holds _lock."""
        expired = [k for k, e in self._entries.items() if now - e.last_access >= self.gc_time]
        for key in expired:
            del self._entries[key]

    def fetch(self, key: QueryKey, loader: Callable[[], Any], stale_time: Optional[float] = None) -> Any:
        """Return the cached value for key if fresh; otherwise load it once and cache it."""
        window = self.stale_time if stale_time is None else stale_time
        with self._lock:
            now = self._clock()
            self._collect(now)
            entry = self._entries.get(key)
            if entry is not None and self._is_fresh(entry, now, window):
                entry.last_access = now
                return entry.value
            key_lock = self._key_locks.setdefault(key, threading.Lock())
            self._key_users[key] = self._key_users.get(key, 0) + 1

        try:
            with key_lock:
                # Another caller may have loaded while we waited.
                with self._lock:
                    now = self._clock()
                    entry = self._entries.get(key)
                    if entry is not None and self._is_fresh(entry, now, window):
                        entry.last_access = now
                        return entry.value
                LOG.debug("query cache miss: %s", key)
                value = loader()
                with self._lock:
                    self._entries[key] = _Entry(value, self._clock())
                return value
        finally:
            with self._lock:
                self._release_key(key)

    def _release_key(self, key: QueryKey) -> None:
        """Caller holds _lock."""
        users = self._key_users.get(key, 0) - 1
        if users > 0:
            self._key_users[key] = users
        else:
            self._key_users.pop(key, None)
            self._key_locks.pop(key, None)

    def get(self, key: QueryKey) -> Any:
        """Cached value regardless of staleness, or None."""
        with self._lock:
            entry = self._entries.get(key)
            return None if entry is None else entry.value

    def is_fresh(self, key: QueryKey) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and self._is_fresh(entry, self._clock(), self.stale_time)

    def set(self, key: QueryKey, value: Any) -> None:
        """Prime an entry (e.g. the detail of a just-updated record)."""
        with self._lock:
            self._entries[key] = _Entry(value, self._clock())

    def invalidate(self, prefix: QueryKey) -> int:
        """Mark entries whose key starts with prefix as stale. Returns how many."""
        n = len(prefix)
        count = 0
        with self._lock:
            for key, entry in self._entries.items():
                if key[:n] == prefix:
                    entry.stale = True
                    count += 1
        return count

    def remove(self, key: QueryKey) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
