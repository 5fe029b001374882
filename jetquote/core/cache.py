"""In-process TTL cache used for airport resolutions"""
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional

DEFAULT_MAXSIZE = 4096


class TTLCache:
    """
    Bounded timestamped key/value map.

    Entries are kept in write order, oldest first. A read drops an expired
    entry; a write first drops every expired entry, then the oldest ones
    while the cache is full. Safe to share between concurrent requests:
    every access happens under a lock, and a racing put simply overwrites
    an equivalent entry.
    """

    def __init__(
        self,
        ttl: float,
        maxsize: int = DEFAULT_MAXSIZE,
        clock: Optional[Callable[[], float]] = None,
    ):
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        if maxsize <= 0:
            raise ValueError("maxsize must be positive")
        self.ttl = ttl
        self.maxsize = maxsize
        self._clock = clock or time.monotonic
        self._entries: "OrderedDict[Hashable, tuple]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[Any]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if now - stored_at >= self.ttl:
                del self._entries[key]
                return None
            return value

    def put(self, key: Hashable, value: Any) -> None:
        stored_at = self._clock()
        with self._lock:
            self._entries.pop(key, None)
            self._expire(stored_at)
            while len(self._entries) >= self.maxsize:
                self._entries.popitem(last=False)
            self._entries[key] = (stored_at, value)

    def _expire(self, now: float) -> None:
        # write order is timestamp order, so expired entries form a prefix
        while self._entries:
            oldest_key, (stored_at, _) = next(iter(self._entries.items()))
            if now - stored_at < self.ttl:
                break
            del self._entries[oldest_key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
