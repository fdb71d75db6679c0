# app.py
"""
Flask entrypoint for the camera thumbnail service.

Routes:
  - /cam/thumb/<name>   PNG thumbnail for a named camera
  - /health             liveness + cache stats

Notes:
  - Camera names come from the lookup file (see camthumb/lookup.py), loaded once.
  - Thumbnails are cached for the configured TTL and refreshed in the background
    once per TTL, so most requests never wait on ffmpeg.
  - Unknown names get a 400 with the lookup error; feeds ffmpeg can't read get a
    500 with a fixed message (ffmpeg's output is only logged).

Run:
  python app.py --port :8989 --lookup ./lookup --ttl 5
  gunicorn -w 1 'app:create_app()'     (one worker: the cache is per-process)
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
from typing import Optional

from flask import Flask, Response, jsonify

from camthumb.cache import ThumbnailCache
from camthumb.config import AppConfig
from camthumb.errors import NameResolutionError, ProductionError
from camthumb.ffmpeg_client import FFmpegClient
from camthumb.logging_setup import configure_logging
from camthumb.lookup import load_lookup
from camthumb.services.thumbnail_service import Producer, ThumbnailService

log = logging.getLogger("camthumb.app")

THUMB_PREFIX = "/cam/thumb/"
INVALID_FEED_MESSAGE = "invalid camera feed"


def create_app(
    cfg: Optional[AppConfig] = None,
    producer: Optional[Producer] = None,
    start_refresher: Optional[bool] = None,
) -> Flask:
    """
    App factory.

    Builds the lookup table, cache, producer and refresher once per process. The
    refresher starts here (unless disabled) so the cache is warming before the
    first request arrives.

    Args:
        cfg: configuration; defaults to AppConfig() read from the environment.
        producer: anything with thumbnail(uri) -> bytes; defaults to FFmpegClient.
        start_refresher: overrides cfg.refresh_enabled.
    """
    cfg = cfg or AppConfig()
    configure_logging(cfg.log_level)

    lookup = load_lookup(cfg.lookup_path)
    cache = ThumbnailCache(ttl_seconds=cfg.cache_ttl_seconds)
    if producer is None:
        producer = FFmpegClient(cfg.ffmpeg_binary, timeout_seconds=cfg.ffmpeg_timeout_seconds)

    service = ThumbnailService(lookup=lookup, cache=cache, producer=producer)
    refresher = service.make_refresher(period_seconds=cfg.cache_ttl_seconds)

    if cfg.refresh_enabled if start_refresher is None else start_refresher:
        refresher.start()

    app = Flask(__name__)
    app.extensions["camthumb"] = {
        "config": cfg,
        "service": service,
        "cache": cache,
        "refresher": refresher,
    }

    # -------------------------
    # Error mapping
    # -------------------------

    @app.errorhandler(NameResolutionError)
    def name_not_found(exc: NameResolutionError):
        """Unknown camera name => 400 with the lookup error text."""
        return Response(str(exc), status=400, mimetype="text/plain")

    @app.errorhandler(ProductionError)
    def production_failed(exc: ProductionError):
        """Thumbnail could not be produced => 500; details stay in the log."""
        return Response(INVALID_FEED_MESSAGE, status=500, mimetype="text/plain")

    # -------------------------
    # Thumbnails
    # -------------------------

    @app.get(THUMB_PREFIX, defaults={"name": ""})
    @app.get(THUMB_PREFIX + "<path:name>")
    def thumbnail(name: str):
        """
        Serve the PNG thumbnail for a camera name.

        The name is everything after /cam/thumb/.
        """
        img = service.get_thumbnail(name)
        resp = Response(img, status=200, mimetype="image/png")
        resp.headers["Content-Length"] = str(len(img))
        return resp

    # -------------------------
    # Health
    # -------------------------

    @app.get("/health")
    def health():
        """Simple health endpoint for Docker/monitoring checks."""
        return jsonify(
            {
                "ok": True,
                "feeds": len(lookup),
                "cached": len(cache),
                "refresher": refresher.running,
            }
        )

    return app


def parse_args(argv=None) -> argparse.Namespace:
    """Command-line overrides for the dev server."""
    ap = argparse.ArgumentParser(description="Serve cached camera thumbnails")
    ap.add_argument("--port", "--listen", dest="listen", help="address to listen on, e.g. :8989")
    ap.add_argument("--lookup", dest="lookup_path", help="lookup file (name uri pairs)")
    ap.add_argument("--ttl", dest="cache_ttl_minutes", type=int, help="cache validity in minutes")
    return ap.parse_args(argv)


def config_from_args(args: argparse.Namespace, base: Optional[AppConfig] = None) -> AppConfig:
    """Apply any flags that were given on top of the environment config."""
    overrides = {k: v for k, v in vars(args).items() if v is not None}
    return dataclasses.replace(base or AppConfig(), **overrides)


if __name__ == "__main__":
    # Dev server (not for production). No reloader: it would start a second refresher.
    cfg = config_from_args(parse_args())
    host, port = cfg.host_port
    create_app(cfg).run(host=host, port=port, debug=False, threaded=True)
