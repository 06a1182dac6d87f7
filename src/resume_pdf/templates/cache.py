"""In-memory cache of compiled templates with LRU and TTL eviction."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_SIZE = 10
DEFAULT_TTL_SECONDS = 300.0


@dataclass
class CacheEntry(Generic[T]):
    value: T
    compiled_at: float
    last_used: float
    use_count: int = 1


class TemplateCache(Generic[T]):
    """Compiled-template cache bounded by size (LRU) and age (TTL).

    An entry whose age has reached ``ttl_seconds`` is never returned; the next
    lookup recompiles it. Callers keep the compiled object they receive, so
    eviction only affects residency.
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_SIZE,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry[T]] = OrderedDict()

    def get_template(self, key: str, compile_fn: Callable[[], T]) -> T:
        """Return the compiled template for key, compiling it if needed."""
        now = self._clock()
        entry = self._entries.get(key)
        if entry is not None and not self._expired(entry, now):
            entry.last_used = now
            entry.use_count += 1
            self._entries.move_to_end(key)
            return entry.value

        logger.debug("Compiling template %r", key)
        value = compile_fn()
        self._entries[key] = CacheEntry(value=value, compiled_at=now, last_used=now)
        self._entries.move_to_end(key)
        self._evict(now)
        return value

    def _expired(self, entry: CacheEntry[T], now: float) -> bool:
        return now - entry.compiled_at >= self.ttl_seconds

    def _evict(self, now: float) -> None:
        if len(self._entries) <= self.max_size:
            return
        for key in [k for k, e in self._entries.items() if self._expired(e, now)]:
            del self._entries[key]
        while len(self._entries) > self.max_size:
            key, _ = self._entries.popitem(last=False)
            logger.debug("Evicted template %r (LRU)", key)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not self._expired(entry, self._clock())

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> dict:
        """Return cache statistics."""
        now = self._clock()
        return {
            "size": len(self._entries),
            "max_size": self.max_size,
            "entries": [
                {
                    "key": key,
                    "use_count": e.use_count,
                    "age": now - e.compiled_at,
                    "idle": now - e.last_used,
                }
                for key, e in self._entries.items()
            ],
        }
