"""Result Cache: a bounded, TTL-expiring LRU map of rendered PNG buffers.

All mutations happen under one lock owned by the cache, so concurrent
requests can share a single instance. There is no single-flight: two
concurrent misses for the same key both render and both write.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: bytes
    inserted_at: float
    expires_at: float


def cache_key(
    text: str,
    content_type: str,
    image_data: str | None,
    template: str | None,
    image_prefix_chars: int = 50,
) -> str:
    """Fingerprint of (text, type, inline image prefix, template)."""
    parts = [
        text,
        content_type,
        image_data[:image_prefix_chars] if image_data else "default",
        template or "default",
    ]
    return hashlib.sha256(json.dumps(parts, ensure_ascii=False).encode("utf-8")).hexdigest()


class ResultCache:
    def __init__(
        self,
        max_entries: int = 100,
        ttl_seconds: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> bytes | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                logger.debug("Cache entry %s expired", key[:12])
                return None
            self._entries.move_to_end(key)
            return entry.value

    def put(self, key: str, value: bytes) -> None:
        now = self._clock()
        entry = CacheEntry(key=key, value=value, inserted_at=now, expires_at=now + self.ttl_seconds)
        with self._lock:
            self._entries[key] = entry
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache evicted %s", evicted[:12])

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def keys(self) -> list[str]:
        """Resident keys, least recently used first. Does not touch recency."""
        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
