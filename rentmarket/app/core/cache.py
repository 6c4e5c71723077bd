"""In-process memoization for per-user aggregate queries.

``StatsCache`` stores each value with its own time-to-live and remembers
which tags it was stored under, so a mutation elsewhere in the app can drop
every dependent entry with a single ``invalidate(tag)`` call.

Computation happens outside the lock: two concurrent misses on the same key
may both compute, and the later write simply replaces the earlier one.
"""

import logging
import threading
import time
from collections import defaultdict
from typing import Any, Callable, Dict, Iterable, NamedTuple, Set

from cachetools import TLRUCache

logger = logging.getLogger(__name__)


class _Entry(NamedTuple):
    value: Any
    ttl: float


def _entry_expiry(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class StatsCache:
    def __init__(self, maxsize: int = 1024, timer: Callable[[], float] = time.monotonic):
        self._entries: TLRUCache = TLRUCache(maxsize=maxsize, ttu=_entry_expiry, timer=timer)
        self._tags: Dict[str, Set[str]] = defaultdict(set)
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
        return default if entry is None else entry.value

    def set(self, key: str, value: Any, ttl: float, tags: Iterable[str] = ()) -> None:
        if ttl <= 0:
            return
        with self._lock:
            self._entries[key] = _Entry(value, ttl)
            for tag in tags:
                self._tags[tag].add(key)

    def get_or_compute(self, key: str, ttl: float, compute_fn: Callable[[], Any], tags: Iterable[str] = ()) -> Any:
        """Return the live cached value for ``key`` or compute, store and return it.

        Exceptions from ``compute_fn`` propagate and nothing is stored.
        """
        with self._lock:
            entry = self._entries.get(key)
        if entry is not None:
            logger.debug("Cache hit for %s", key)
            return entry.value

        logger.debug("Cache miss for %s", key)
        value = compute_fn()
        self.set(key, value, ttl, tags)
        return value

    def invalidate(self, tag: str) -> int:
        """Drop every entry stored under ``tag``; return how many were live."""
        with self._lock:
            keys = self._tags.pop(tag, set())
            dropped = 0
            for key in keys:
                if self._entries.pop(key, None) is not None:
                    dropped += 1
        logger.info("Invalidated cache tag %s (%d entries)", tag, dropped)
        return dropped

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._tags.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            self._entries.expire()
            return len(self._entries)


stats_cache = StatsCache()
