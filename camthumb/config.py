# camthumb/config.py
"""
Configuration for the camera thumbnail service.

All settings are fixed at process start: listen address, lookup file path, cache
validity window, ffmpeg location, and logging level. Each one can be overridden
through the environment, and app.py lets the listen address, lookup path and TTL
be overridden again on the command line.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Tuple


def _env_int(name: str, default: int) -> int:
    """Read an integer environment variable, returning default on missing/invalid values."""
    try:
        return int(os.getenv(name, str(default)))
    except Exception:
        return default


def _env_bool(name: str, default: bool) -> bool:
    """
    Read a boolean-ish environment variable.

    Treats these as false: 0, false, no, off
    """
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")


def parse_listen(listen: str) -> Tuple[str, int]:
    """
    Split a listen address into (host, port).

    ":8989" listens on all interfaces; "127.0.0.1:9000" binds one. IPv6 hosts are
    written in brackets ("[::1]:9000") and returned without them.

    Raises:
        ValueError if the port is missing or not a valid number.
    """
    listen = (listen or "").strip()
    host, sep, port_raw = listen.rpartition(":")
    if not sep:
        host, port_raw = "", listen
    port = int(port_raw)
    if not 0 < port < 65536:
        raise ValueError(f"port out of range: {port}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    return (host or "0.0.0.0", port)


DEFAULT_TTL_MINUTES = 1


@dataclass(frozen=True)
class AppConfig:
    """Immutable app configuration."""

    # Server
    listen: str = os.getenv("CAMTHUMB_LISTEN", ":8989")
    lookup_path: str = os.getenv("CAMTHUMB_LOOKUP", "./lookup")

    # Cache controls (the refresher sweeps once per TTL)
    cache_ttl_minutes: int = _env_int("CAMTHUMB_CACHE_TTL_MINUTES", DEFAULT_TTL_MINUTES)
    refresh_enabled: bool = _env_bool("CAMTHUMB_REFRESH", True)

    # ffmpeg
    ffmpeg_binary: str = os.getenv("CAMTHUMB_FFMPEG", "ffmpeg")
    ffmpeg_timeout_seconds: int = _env_int("CAMTHUMB_FFMPEG_TIMEOUT", 0)

    log_level: str = os.getenv("CAMTHUMB_LOG_LEVEL", "INFO")

    def __post_init__(self):
        # dataclass frozen => use object.__setattr__
        if not isinstance(self.cache_ttl_minutes, int) or self.cache_ttl_minutes < 1:
            object.__setattr__(self, "cache_ttl_minutes", DEFAULT_TTL_MINUTES)
        if self.ffmpeg_timeout_seconds < 0:
            object.__setattr__(self, "ffmpeg_timeout_seconds", 0)

    @property
    def cache_ttl_seconds(self) -> int:
        return self.cache_ttl_minutes * 60

    @property
    def host_port(self) -> Tuple[str, int]:
        return parse_listen(self.listen)
