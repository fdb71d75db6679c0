"""Shared pytest fixtures for camthumb tests.

Provides a controllable clock, a fake thumbnail producer that records its calls,
a temporary lookup file, and a Flask test client wired to the fake producer with
the background refresher switched off.
"""

from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import Dict, List

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from camthumb.config import AppConfig  # noqa: E402
from camthumb.errors import ProductionError  # noqa: E402


class FakeClock:
    """Manually advanced time source (seconds)."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProducer:
    """Stand-in for FFmpegClient: returns canned bytes per URI and counts calls."""

    def __init__(self, images: Dict[str, bytes] | None = None) -> None:
        self.images: Dict[str, bytes] = dict(images or {})
        self.failing: set[str] = set()
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def thumbnail(self, uri: str) -> bytes:
        with self._lock:
            self.calls.append(uri)
        if uri in self.failing or uri not in self.images:
            raise ProductionError(f"cannot decode {uri}")
        return self.images[uri]


LOOKUP_TEXT = """\
# name  uri
cam1 rtsp://10.0.0.1/live
cam2 rtsp://10.0.0.2/live
"""


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def producer() -> FakeProducer:
    return FakeProducer(
        {
            "rtsp://10.0.0.1/live": b"PNGDATA1",
            "rtsp://10.0.0.2/live": b"PNGDATA-CAM2",
        }
    )


@pytest.fixture
def lookup_file(tmp_path: Path) -> Path:
    path = tmp_path / "lookup"
    path.write_text(LOOKUP_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def app(lookup_file: Path, producer: FakeProducer):
    from app import create_app

    cfg = AppConfig(lookup_path=str(lookup_file), cache_ttl_minutes=5, refresh_enabled=False)
    return create_app(cfg, producer=producer)


@pytest.fixture
def client(app):
    return app.test_client()
