import subprocess

import pytest

from camthumb import ffmpeg_client
from camthumb.errors import ProductionError
from camthumb.ffmpeg_client import FFmpegClient


class FakeRun:
    def __init__(self, returncode=0, stdout=b"\x89PNG...", stderr=b"", exc=None):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.exc = exc
        self.calls = []

    def __call__(self, args, **kwargs):
        self.calls.append((args, kwargs))
        if self.exc is not None:
            raise self.exc
        return subprocess.CompletedProcess(args, self.returncode, self.stdout, self.stderr)


@pytest.fixture
def fake_run(monkeypatch):
    run = FakeRun()
    monkeypatch.setattr(ffmpeg_client.subprocess, "run", run)
    return run


def test_build_args_grabs_one_png_frame_to_stdout():
    args = FFmpegClient("/usr/bin/ffmpeg").build_args("rtsp://cam/live")

    assert args[0] == "/usr/bin/ffmpeg"
    assert args[args.index("-i") + 1] == "rtsp://cam/live"
    assert args[args.index("-vf") + 1] == "thumbnail"
    assert args[args.index("-frames:v") + 1] == "1"
    assert args[args.index("-f") + 1] == "image2pipe"
    assert args[args.index("-c:v") + 1] == "png"
    assert args[-1] == "pipe:1"


def test_thumbnail_returns_stdout(fake_run):
    assert FFmpegClient().thumbnail("rtsp://cam/live") == b"\x89PNG..."

    args, kwargs = fake_run.calls[0]
    assert "rtsp://cam/live" in args
    assert kwargs["stdout"] == subprocess.PIPE
    assert kwargs["timeout"] is None


def test_timeout_is_passed_when_configured(fake_run):
    FFmpegClient(timeout_seconds=15).thumbnail("rtsp://cam/live")
    assert fake_run.calls[0][1]["timeout"] == 15


def test_nonzero_exit_raises(fake_run):
    fake_run.returncode = 1
    fake_run.stderr = b"Connection refused"

    with pytest.raises(ProductionError, match="Connection refused"):
        FFmpegClient().thumbnail("rtsp://cam/live")


def test_empty_output_raises(fake_run):
    fake_run.stdout = b""

    with pytest.raises(ProductionError, match="no image"):
        FFmpegClient().thumbnail("rtsp://cam/live")


def test_timeout_raises(fake_run):
    fake_run.exc = subprocess.TimeoutExpired(cmd="ffmpeg", timeout=3)

    with pytest.raises(ProductionError, match="timed out"):
        FFmpegClient(timeout_seconds=3).thumbnail("rtsp://cam/live")


@pytest.mark.parametrize("uri", ["", "   ", "http://[::1"])
def test_invalid_uri_never_runs_ffmpeg(fake_run, uri):
    with pytest.raises(ProductionError):
        FFmpegClient().thumbnail(uri)
    assert fake_run.calls == []


def test_missing_binary_raises():
    with pytest.raises(ProductionError, match="not found"):
        FFmpegClient("camthumb-no-such-ffmpeg-binary").thumbnail("rtsp://cam/live")
