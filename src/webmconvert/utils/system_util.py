"""
Utility functions for running system commands and verifying binary availability.

This module provides helper functions to execute external commands and check if
required binaries exist in the system's PATH. Every external tool the converter
drives (ffmpeg, ffprobe, ffmpegthumbnailer, mkclean) goes through run_cmd.

Functions:
    - run_cmd: Executes a system command and returns its exit code along with the
      captured standard output and error streams.
    - which_or_die: Checks for the presence of a specific binary on the system's
      PATH and raises MissingDependencyError if it is unavailable.
"""
import shutil
import subprocess
from enum import Enum
from typing import List, NamedTuple, Sequence

from webmconvert.utils.errors import MissingDependencyError, SpawnError


class Capture(Enum):
    """Which output streams of a command are kept."""
    NONE = "none"
    STDOUT = "stdout"
    STDERR = "stderr"
    BOTH = "both"


class CommandResult(NamedTuple):
    exit_code: int
    stdout: bytes
    stderr: bytes


def run_cmd(cmd: Sequence[str], capture: Capture = Capture.BOTH) -> CommandResult:
    """
    Run a command to completion and return (code, stdout, stderr).

    Streams that are not captured are sent to DEVNULL instead of being buffered,
    so long encodes do not accumulate output in memory. No timeout is applied.

    Raises:
        SpawnError: The binary could not be located or executed.
    """
    argv: List[str] = [str(part) for part in cmd]
    keep_out = capture in (Capture.STDOUT, Capture.BOTH)
    keep_err = capture in (Capture.STDERR, Capture.BOTH)
    try:
        p = subprocess.run(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE if keep_out else subprocess.DEVNULL,
            stderr=subprocess.PIPE if keep_err else subprocess.DEVNULL,
        )
    except OSError as e:
        raise SpawnError(argv[0], e.strerror or str(e)) from e
    return CommandResult(p.returncode, p.stdout or b"", p.stderr or b"")


def which_or_die(binary: str) -> str:
    """Check if a binary exists on PATH, raise MissingDependencyError if not found."""
    path = shutil.which(binary)
    if path is None:
        raise MissingDependencyError(binary)
    return path
