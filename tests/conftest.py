import json
from pathlib import Path

import pytest

from webmconvert.utils import LogLevel, logger, system_util
from webmconvert.utils.errors import SpawnError
from webmconvert.utils.system_util import Capture, CommandResult

OK = CommandResult(0, b"", b"")


class FakeNotifier:
    def __init__(self):
        self.messages = []

    def notify(self, message, is_error=False):
        self.messages.append((message, is_error))


class FakeRunner:
    """Stands in for system_util.run_cmd, answering like the real media tools."""

    def __init__(self, height=720, fail_encode_for=(), integrity_errors=(), interrupt_on=None,
                 spawn_error_for=()):
        self.height = height
        self.fail_encode_for = set(fail_encode_for)
        self.integrity_errors = set(integrity_errors)
        self.interrupt_on = interrupt_on
        self.spawn_error_for = set(spawn_error_for)
        self.calls = []

    def __call__(self, cmd, capture=Capture.BOTH):
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)
        binary = cmd[0]

        if binary == "ffprobe":
            payload = {
                "streams": [{"codec_name": "h264", "width": 1280, "height": self.height}],
                "format": {"duration": "12.5"},
            }
            return CommandResult(0, json.dumps(payload).encode(), b"")

        if binary == "ffmpegthumbnailer":
            Path(cmd[cmd.index("-o") + 1]).write_bytes(b"jpg")
            return OK

        if binary == "mkclean":
            Path(cmd[-1]).write_bytes(b"optimized")
            return OK

        src = Path(cmd[cmd.index("-i") + 1])
        if cmd[-3:] == ["-f", "null", "-"]:
            diagnostics = b"Invalid data found\n" if src.name in self.integrity_errors else b""
            return CommandResult(0, b"", diagnostics)

        if self.interrupt_on and self.interrupt_on(src):
            raise KeyboardInterrupt()
        if src.name in self.spawn_error_for:
            raise SpawnError(binary, "No such file or directory")
        if src.name in self.fail_encode_for:
            return CommandResult(1, b"", b"Conversion failed!\n")
        Path(cmd[-1]).write_bytes(b"webm")
        return OK

    def encoded_sources(self):
        return [Path(c[c.index("-i") + 1]).name for c in self.calls
                if c[0] == "ffmpeg" and c[-3:] != ["-f", "null", "-"]]


@pytest.fixture(autouse=True)
def _isolate(monkeypatch, tmp_path):
    for key in ("PUSHOVER_TOKEN", "PUSHOVER_USER"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("WEBM_CONVERT_CONFIG", str(tmp_path / "config" / ".webm-convert.json"))
    logger.set_log_level(LogLevel.INFO)
    yield
    logger.set_log_level(LogLevel.INFO)


@pytest.fixture
def fake_runner(monkeypatch):
    runner = FakeRunner()
    monkeypatch.setattr(system_util, "run_cmd", runner)
    return runner


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def videos(tmp_path):
    src = tmp_path / "src"
    src.mkdir()
    paths = []
    for name in ("first.mkv", "second.mkv", "third.mkv"):
        path = src / name
        path.write_bytes(b"video")
        paths.append(path)
    return paths
