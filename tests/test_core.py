import json
from pathlib import Path

import pytest

from webmconvert.transcode import core
from webmconvert.transcode.resolution import match
from webmconvert.utils import system_util
from webmconvert.utils.errors import EncodeError, ProbeError, SpawnError
from webmconvert.utils.system_util import Capture, CommandResult


def test_build_ffmpeg_cmd_contract():
    cmd = core.build_ffmpeg_cmd(Path("in/Movie.mkv"), Path("out/Movie/Movie.webm"), match(1080))
    assert cmd == [
        "ffmpeg", "-hide_banner", "-nostdin", "-loglevel", "error",
        "-i", "in/Movie.mkv",
        "-y",
        "-sn",
        "-metadata", "title=",
        "-map", "0",
        "-ac", "8",
        "-b:v", "0",
        "-speed", "4",
        "-frame-parallel", "1",
        "-auto-alt-ref", "1",
        "-lag-in-frames", "25",
        "-crf", "31", "-tile-columns", "2", "-threads", "8",
        "out/Movie/Movie.webm",
    ]


def test_thumbnail_and_mkclean_cmds():
    assert core.build_thumbnail_cmd(Path("a.mkv"), Path("a/background.jpg")) == [
        "ffmpegthumbnailer", "-s", "0", "-i", "a.mkv", "-o", "a/background.jpg"
    ]
    assert core.build_mkclean_cmd(Path("a_unoptimized.webm"), Path("a.webm")) == [
        "mkclean", "--quiet", "--optimize", "a_unoptimized.webm", "a.webm"
    ]


def _stub_probe(monkeypatch, result):
    monkeypatch.setattr(system_util, "run_cmd", lambda cmd, capture=Capture.BOTH: result)


def test_probe_height(monkeypatch):
    payload = {"streams": [{"codec_name": "h264", "width": 1920, "height": 1080}], "format": {"duration": "60.5"}}
    _stub_probe(monkeypatch, CommandResult(0, json.dumps(payload).encode(), b""))

    info = core.ffprobe_video_info(Path("a.mkv"))
    assert info.codec == "h264"
    assert info.duration == 60.5
    assert core.probe_height(Path("a.mkv")) == 1080


@pytest.mark.parametrize("result", [
    CommandResult(1, b"", b"a.mkv: No such file or directory"),
    CommandResult(0, b"not json", b""),
    CommandResult(0, b'{"streams": []}', b""),
    CommandResult(0, b'{"streams": [{"codec_name": "h264"}]}', b""),
])
def test_probe_failures_raise_probe_error(monkeypatch, result):
    _stub_probe(monkeypatch, result)
    with pytest.raises(ProbeError):
        core.probe_height(Path("a.mkv"))


def test_transcode_video_non_zero_exit(monkeypatch, tmp_path):
    calls = []

    def fake_run_cmd(cmd, capture=Capture.BOTH):
        calls.append(capture)
        return CommandResult(187, b"", b"Error while opening encoder")

    monkeypatch.setattr(system_util, "run_cmd", fake_run_cmd)
    with pytest.raises(EncodeError) as exc:
        core.transcode_video(tmp_path / "a.mkv", tmp_path / "a.webm", match(480))
    assert exc.value.exit_code == 187
    assert calls == [Capture.STDERR]


def test_thumbnail_is_best_effort(monkeypatch, tmp_path):
    def missing(cmd, capture=Capture.BOTH):
        raise SpawnError("ffmpegthumbnailer", "No such file or directory")

    monkeypatch.setattr(system_util, "run_cmd", missing)
    assert core.generate_thumbnail(tmp_path / "a.mkv", tmp_path / "background.jpg") is False

    monkeypatch.setattr(system_util, "run_cmd", lambda cmd, capture=Capture.BOTH: CommandResult(1, b"", b""))
    assert core.generate_thumbnail(tmp_path / "a.mkv", tmp_path / "background.jpg") is False

    monkeypatch.setattr(system_util, "run_cmd", lambda cmd, capture=Capture.BOTH: CommandResult(0, b"", b""))
    assert core.generate_thumbnail(tmp_path / "a.mkv", tmp_path / "background.jpg") is True


def test_optimize_removes_unoptimized(fake_runner, tmp_path):
    unoptimized = tmp_path / "a_unoptimized.webm"
    unoptimized.write_bytes(b"raw")

    core.optimize_webm(unoptimized, tmp_path / "a.webm")

    assert not unoptimized.exists()
    assert (tmp_path / "a.webm").read_bytes() == b"optimized"


def test_optimize_failure_keeps_unoptimized(monkeypatch, tmp_path):
    unoptimized = tmp_path / "a_unoptimized.webm"
    unoptimized.write_bytes(b"raw")
    monkeypatch.setattr(system_util, "run_cmd", lambda cmd, capture=Capture.BOTH: CommandResult(2, b"", b"bad"))

    with pytest.raises(EncodeError):
        core.optimize_webm(unoptimized, tmp_path / "a.webm")
    assert unoptimized.exists()
