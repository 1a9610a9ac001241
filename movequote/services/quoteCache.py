"""
In-memory TTL cache for computed quotes.

Entries are never swept in the background: an entry past its expiry is simply
treated as a miss (and dropped) the next time it is read.  The clock is
injected so tests can move time forward without sleeping.
"""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from threading import Lock
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")

# Upper bound on stored entries; the oldest inserted entry is evicted first
DEFAULT_MAX_ENTRIES = 10_000


class TTLCache(Generic[V]):
    """Key -> (value, expiry) map with passive, read-time expiry."""

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_MAX_ENTRIES,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._max_entries = max_entries
        self._entries: OrderedDict[str, tuple[V, float]] = OrderedDict()
        self._lock = Lock()

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                logger.debug("Cache entry expired: %s", key)
                return None
            return value

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + self.ttl_seconds)
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
