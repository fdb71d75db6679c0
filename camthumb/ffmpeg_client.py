# camthumb/ffmpeg_client.py
"""
Thin wrapper around the ffmpeg binary for grabbing a single PNG frame from a feed.
"""

from __future__ import annotations

import logging
import subprocess
from typing import List, Optional
from urllib.parse import urlsplit

from .errors import ProductionError

log = logging.getLogger(__name__)


class FFmpegClient:
    """Runs ffmpeg against a media URI and returns one encoded still image."""

    def __init__(self, binary: str = "ffmpeg", timeout_seconds: Optional[float] = None) -> None:
        """
        Args:
            binary: ffmpeg executable name or path.
            timeout_seconds: kill ffmpeg after this long; None waits forever.
        """
        self.binary = binary
        self.timeout_seconds = timeout_seconds or None

    def build_args(self, uri: str) -> List[str]:
        """Command line for a single representative frame written as PNG to stdout."""
        return [
            self.binary,
            "-loglevel", "error",
            "-nostdin",
            "-i", uri,
            "-vf", "thumbnail",
            "-frames:v", "1",
            "-f", "image2pipe",
            "-c:v", "png",
            "pipe:1",
        ]

    @staticmethod
    def _check_uri(uri: str) -> str:
        uri = (uri or "").strip()
        if not uri:
            raise ProductionError("empty feed URI")
        try:
            urlsplit(uri)
        except ValueError as exc:
            raise ProductionError(f"invalid feed URI {uri!r}: {exc}") from exc
        return uri

    def thumbnail(self, uri: str) -> bytes:
        """
        Produce a PNG thumbnail for uri.

        Raises:
            ProductionError on a bad URI, a missing binary, a non-zero exit, a
            timeout, or when ffmpeg writes nothing.
        """
        args = self.build_args(self._check_uri(uri))
        log.debug("running %s", " ".join(args))

        try:
            proc = subprocess.run(
                args,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout_seconds,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ProductionError(f"ffmpeg not found: {self.binary}") from exc
        except subprocess.TimeoutExpired as exc:
            raise ProductionError(f"ffmpeg timed out after {self.timeout_seconds}s") from exc
        except OSError as exc:
            raise ProductionError(f"could not run ffmpeg: {exc}") from exc

        if proc.returncode != 0:
            err = proc.stderr.decode("utf-8", errors="replace").strip()
            raise ProductionError(f"ffmpeg exited with {proc.returncode}: {err}")

        if not proc.stdout:
            raise ProductionError("ffmpeg produced no image")

        return proc.stdout
