"""
Functions to probe videos and build and run the external conversion commands.

This module provides functionality to read a video's dimensions using ffprobe,
build the ffmpeg command line that encodes a title to WebM (VP9) with a given
resolution profile, render a background thumbnail with ffmpegthumbnailer and
optimize a finished WebM file with mkclean.
"""
import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from webmconvert.utils import constants, logger, system_util, LogLevel
from webmconvert.utils.errors import EncodeError, ProbeError, SpawnError
from webmconvert.utils.system_util import Capture
from .resolution import ResolutionProfile


@dataclass
class VideoInfo:
    codec: str
    width: Optional[int]
    height: Optional[int]
    duration: Optional[float] = None


def ffprobe_video_info(path: Path) -> VideoInfo:
    """Probe the first video stream of a file for codec, size and duration."""
    cmd = [
        constants.FFPROBE_BIN, "-v", "error",
        "-select_streams", "v:0",
        "-show_entries",
        "stream=codec_name,width,height:format=duration",
        "-of", "json",
        str(path)
    ]
    code, out, err = system_util.run_cmd(cmd, Capture.BOTH)
    if code != 0:
        raise ProbeError(f"ffprobe exited with code {code}: {_tail(err)}")

    try:
        data = json.loads(out or b"{}")
    except ValueError as e:
        raise ProbeError(f"ffprobe returned invalid JSON: {e}")

    streams = data.get("streams") or []
    if not streams:
        raise ProbeError("no video stream found")
    s = streams[0]

    duration = None
    if "format" in data and "duration" in data["format"]:
        try:
            duration = float(data["format"]["duration"])
        except (ValueError, TypeError):
            pass

    return VideoInfo(
        codec=s.get("codec_name", ""),
        width=s.get("width"),
        height=s.get("height"),
        duration=duration,
    )


def probe_height(path: Path) -> int:
    """Return the pixel height of the first video stream."""
    info = ffprobe_video_info(path)
    if not isinstance(info.height, int) or info.height <= 0:
        raise ProbeError(f"could not determine video height (got {info.height!r})")
    return info.height


def build_ffmpeg_cmd(src: Path, dst: Path, profile: ResolutionProfile) -> List[str]:
    """Build the ffmpeg command that encodes `src` to WebM at `dst`."""
    return [
        constants.FFMPEG_BIN,
        "-hide_banner",
        "-nostdin",
        "-loglevel", "error",
        "-i", str(src),
        "-y",
        "-sn",
        "-metadata", "title=",
        "-map", "0",
        "-ac", str(constants.AUDIO_CHANNELS),
        "-b:v", "0",
        "-speed", str(constants.ENCODER_SPEED),
        "-frame-parallel", "1",
        "-auto-alt-ref", "1",
        "-lag-in-frames", str(constants.LAG_IN_FRAMES),
        *profile.encoder_params,
        str(dst),
    ]


def build_thumbnail_cmd(src: Path, dst: Path) -> List[str]:
    # "-s 0" keeps the original frame size
    return [constants.THUMBNAILER_BIN, "-s", "0", "-i", str(src), "-o", str(dst)]


def build_mkclean_cmd(src: Path, dst: Path) -> List[str]:
    return [constants.MKCLEAN_BIN, "--quiet", "--optimize", str(src), str(dst)]


def transcode_video(src: Path, dst: Path, profile: ResolutionProfile) -> None:
    """
    Encode a video to WebM with the given resolution profile.

    Args:
        src: Source video file path
        dst: Destination .webm file path
        profile: Resolution profile supplying quality and parallelism flags

    Raises:
        SpawnError: ffmpeg could not be started
        EncodeError: ffmpeg exited non-zero
    """
    cmd = build_ffmpeg_cmd(src, dst, profile)
    logger.log("encode.start", LogLevel.INFO, file=src.name, dst=dst.name, resolution=f"{profile.height}p")
    logger.log("encode.cmd", LogLevel.DEBUG, cmd=" ".join(cmd))

    code, _, err = system_util.run_cmd(cmd, Capture.STDERR)
    if code != 0:
        logger.log("encode.failed", LogLevel.ERROR, file=src.name, exit_code=code, error=_tail(err))
        raise EncodeError(f"ffmpeg exited with code {code}", code)

    logger.log("encode.complete", LogLevel.INFO, file=src.name)


def generate_thumbnail(src: Path, dst: Path) -> bool:
    """Render a full-size background image. Best effort: failures are only logged."""
    try:
        code, _, _ = system_util.run_cmd(build_thumbnail_cmd(src, dst), Capture.NONE)
    except SpawnError as e:
        logger.log("thumbnail.skipped", LogLevel.WARN, file=src.name, error=str(e))
        return False
    if code != 0:
        logger.log("thumbnail.failed", LogLevel.WARN, file=src.name, exit_code=code)
        return False
    return True


def optimize_webm(src: Path, dst: Path) -> None:
    """Rewrite `src` into an optimized `dst` with mkclean, then delete `src`."""
    code, _, err = system_util.run_cmd(build_mkclean_cmd(src, dst), Capture.STDERR)
    if code != 0:
        logger.log("optimize.failed", LogLevel.ERROR, file=src.name, exit_code=code, error=_tail(err))
        raise EncodeError(f"mkclean exited with code {code}", code)
    src.unlink(missing_ok=True)
    logger.log("optimize.complete", LogLevel.DEBUG, file=dst.name)


def _tail(data: bytes, limit: int = 200) -> str:
    """Last `limit` characters of a command's output, for log lines."""
    return data.decode("utf-8", errors="replace").strip()[-limit:]
