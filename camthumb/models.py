# camthumb/models.py
"""
Domain models.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Feed:
    """A camera feed: the short name clients use and the media URI ffmpeg reads."""
    name: str
    uri: str
