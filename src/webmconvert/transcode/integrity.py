"""
Decode-only integrity checks.

ffmpeg decodes the whole file to the null muxer with error-level logging, so a
clean file produces no diagnostic output at all. Any text on stderr is treated
as an integrity problem; this is a heuristic and counts every reported error,
including ones a player would recover from.
"""
from pathlib import Path
from typing import List

from webmconvert.utils import constants, logger, system_util, LogLevel
from webmconvert.utils.system_util import Capture


def build_integrity_cmd(path: Path) -> List[str]:
    return [
        constants.FFMPEG_BIN,
        "-nostdin",
        "-v", "error",
        "-i", str(path),
        "-f", "null",
        "-",
    ]


def check_integrity(path: Path) -> bool:
    """Return True when the decode pass reports any problem with `path`."""
    _, _, err = system_util.run_cmd(build_integrity_cmd(path), Capture.STDERR)
    diagnostics = err.decode("utf-8", errors="replace").strip()
    if diagnostics:
        logger.log("integrity.problem", LogLevel.DEBUG, file=Path(path).name, output=diagnostics[:200])
        return True
    return False
