# camthumb/cache.py
"""
In-memory thumbnail cache with a fixed validity window.

Entries are checked for staleness when they are read, never on a timer. A stale
entry is dropped by whichever lookup finds it, and that caller pays for the
regeneration.

This is a per-process cache. If you run multiple gunicorn workers, each worker
has its own cache (and its own refresher).
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .errors import ProductionError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A produced thumbnail and the time it was stored."""
    key: str
    artifact: bytes
    produced_at: float


class ThumbnailCache:
    """
    Key -> thumbnail store guarded by a single lock.

    The lock only covers the dict. Producers (ffmpeg runs, which can take seconds)
    are always called with the lock released, so one slow feed never blocks
    lookups for other feeds or the refresher.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time) -> None:
        """
        Args:
            ttl_seconds: validity window; an entry older than this is stale.
            clock: returns the current time in seconds (tests pass a fake one).
        """
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._store: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def _is_stale(self, entry: CacheEntry, now: float) -> bool:
        return (now - entry.produced_at) > self.ttl_seconds

    def get_or_produce(self, key: str, produce: Callable[[], bytes]) -> Optional[bytes]:
        """
        Return a valid thumbnail for key, producing a new one if needed.

        Args:
            key: Feed key.
            produce: Called on a miss or stale entry. Returns the thumbnail bytes
                or raises ProductionError.

        Returns:
            The cached or newly produced bytes, or None if production failed.
            Failures are not cached, so the next call tries again.
        """
        with self._lock:
            entry = self._store.get(key)
            if entry is not None:
                if not self._is_stale(entry, self._clock()):
                    return entry.artifact
                del self._store[key]

        try:
            artifact = produce()
        except ProductionError as exc:
            log.warning("thumbnail production failed for %s: %s", key, exc)
            return None

        self.set(key, artifact)
        return artifact

    def set(self, key: str, artifact: bytes) -> None:
        """Store artifact under key, replacing whatever was there."""
        with self._lock:
            self._store[key] = CacheEntry(key=key, artifact=artifact, produced_at=self._clock())

    def peek(self, key: str) -> Optional[CacheEntry]:
        """Return the stored entry for key, stale or not, without evicting it."""
        with self._lock:
            return self._store.get(key)

    def clear(self) -> None:
        """Clear all cached entries."""
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store
