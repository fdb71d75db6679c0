# camthumb/services/thumbnail_service.py
"""
Thumbnail lookup logic.

Responsibilities:
  - resolve a camera name to its feed
  - serve the cached thumbnail, producing it with ffmpeg when needed
  - build the refresher that keeps all known feeds warm
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Tuple

from ..cache import ThumbnailCache
from ..errors import ProductionError
from ..lookup import NameLookup
from ..refresher import Refresher

log = logging.getLogger(__name__)


class Producer(Protocol):
    def thumbnail(self, uri: str) -> bytes: ...


@dataclass
class ThumbnailService:
    """Ties the name lookup, the cache and the producer together."""

    lookup: NameLookup
    cache: ThumbnailCache
    producer: Producer

    def known_keys(self) -> Tuple[str, ...]:
        """Names the refresher keeps warm."""
        return self.lookup.names()

    def produce_for_key(self, name: str) -> bytes:
        """Run the producer for a known name, bypassing the cache."""
        feed = self.lookup.resolve(name)
        return self.producer.thumbnail(feed.uri)

    def get_thumbnail(self, name: str) -> bytes:
        """
        Return the thumbnail for a camera name.

        The name is resolved before the cache is consulted, so unknown names never
        reach the cache or the producer.

        Raises:
            NameResolutionError for unknown names.
            ProductionError if no thumbnail could be produced, whatever the
                producer raised.
        """
        feed = self.lookup.resolve(name)

        def produce() -> bytes:
            try:
                return self.producer.thumbnail(feed.uri)
            except ProductionError:
                raise
            except Exception as exc:
                log.exception("unexpected error producing thumbnail for %s", feed.name)
                raise ProductionError(f"unexpected producer error: {exc}") from exc

        img = self.cache.get_or_produce(feed.name, produce)
        if img is None:
            raise ProductionError("invalid camera feed")
        return img

    def make_refresher(self, period_seconds: float) -> Refresher:
        """Build a refresher over every known name, publishing into this service's cache."""
        return Refresher(
            cache=self.cache,
            keys=self.known_keys(),
            produce_for_key=self.produce_for_key,
            period_seconds=period_seconds,
        )
