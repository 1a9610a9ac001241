"""
Process-wide reservation state for time slots.

Maps a service date to the set of slot start times already taken.  The store
is the only shared mutable resource in the quoting core, so every read and
write goes through one lock.  ``reserve`` is a compare-and-append: checking
that a slot is free and claiming it happen inside the same critical section,
which keeps two concurrent requests from both winning the same slot.

In production this should be backed by Redis or the database for
multi-instance deployments.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, time
from threading import Lock

logger = logging.getLogger(__name__)


class ReservationStore:
    """In-memory ``date -> {start_time}`` reservation map."""

    def __init__(self) -> None:
        self._reserved: defaultdict[date, set[time]] = defaultdict(set)
        self._lock = Lock()

    def reserve(self, day: date, start: time) -> bool:
        """Claim ``(day, start)``.  Returns False if it was already taken."""
        with self._lock:
            taken = self._reserved[day]
            if start in taken:
                return False
            taken.add(start)
            return True

    def release(self, day: date, start: time) -> bool:
        """Free ``(day, start)``.  Returns False if it was not reserved."""
        with self._lock:
            taken = self._reserved.get(day)
            if not taken or start not in taken:
                return False
            taken.discard(start)
            if not taken:
                del self._reserved[day]
            return True

    def is_reserved(self, day: date, start: time) -> bool:
        with self._lock:
            return start in self._reserved.get(day, ())

    def reserved_on(self, day: date) -> frozenset[time]:
        with self._lock:
            return frozenset(self._reserved.get(day, ()))

    def clear(self) -> None:
        """Drop every reservation.  Useful for testing."""
        with self._lock:
            self._reserved.clear()
