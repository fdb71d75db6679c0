# camthumb/refresher.py
"""
Background refresher that keeps every known feed's thumbnail warm.

Responsibilities:
  - sweep all known keys once at startup so the first requests hit a warm cache
  - repeat the sweep every period (the cache TTL) until shutdown
  - publish each new thumbnail with ThumbnailCache.set()

Sweeps run on one thread and never overlap: the wait for the next sweep starts
only once the current one has finished.
"""

from __future__ import annotations

import atexit
import logging
import threading
from typing import Callable, Dict, Iterable, Optional

from .cache import ThumbnailCache
from .errors import ProductionError

log = logging.getLogger(__name__)


class Refresher:
    """Periodic driver that force-refreshes a fixed set of cache keys."""

    def __init__(
        self,
        cache: ThumbnailCache,
        keys: Iterable[str],
        produce_for_key: Callable[[str], bytes],
        period_seconds: float,
    ) -> None:
        self.cache = cache
        self.keys = tuple(keys)
        self.produce_for_key = produce_for_key
        self.period_seconds = float(period_seconds)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._stopping: Optional[threading.Thread] = None
        self._atexit_registered = False
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        """True while the sweep thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def refresh_all(self) -> Dict[str, bool]:
        """
        Produce a fresh thumbnail for every known key.

        A key that fails is skipped and its current cache entry (if any) is left
        alone. Failures never stop the sweep and are not retried until the next one.

        Returns:
            key -> True if the key was refreshed.
        """
        results: Dict[str, bool] = {}
        log.debug("refresh sweep starting (%d feeds)", len(self.keys))

        for key in self.keys:
            try:
                artifact = self.produce_for_key(key)
            except ProductionError as exc:
                log.warning("refresh failed for %s: %s", key, exc)
                results[key] = False
                continue
            except Exception:
                log.exception("unexpected error refreshing %s", key)
                results[key] = False
                continue

            self.cache.set(key, artifact)
            results[key] = True

        ok = sum(1 for v in results.values() if v)
        log.info("refresh sweep done: %d ok, %d failed", ok, len(results) - ok)
        return results

    def _run(self, stop: threading.Event, previous: Optional[threading.Thread]) -> None:
        # A thread left behind by stop(timeout=...) may still be mid-sweep.
        if previous is not None:
            previous.join()
        while True:
            self.refresh_all()
            if stop.wait(self.period_seconds):
                break

    def start(self) -> None:
        """Start the sweep thread. Calling it again while running does nothing."""
        with self._lock:
            if self.running:
                return
            previous = self._stopping if self._stopping is not None and self._stopping.is_alive() else None
            self._stop = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop, previous),
                name="camthumb-refresher",
                daemon=True,
            )
            self._thread.start()
            if not self._atexit_registered:
                atexit.register(self.stop)
                self._atexit_registered = True
        log.info("refresher started: %d feeds every %.0fs", len(self.keys), self.period_seconds)

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Signal the sweep thread to exit and wait for it.

        A sweep already in progress finishes its current key list first. If the
        join times out, a later start() waits for that sweep before running its own.
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._stop.set()
            self._thread = None
            self._stopping = thread

        thread.join(timeout=timeout)
        log.info("refresher stopped")
