"""
Structured, single-line event logging for the converter.

Every entry is one line: a UTC timestamp, the level, a dotted event name
('file.done', 'encode.failed') and key=value fields, separated by " | ".
Entries go through tqdm.write so they print above the live progress line
instead of tearing it. WARN and ERROR entries go to stderr; the rest go to stdout.
"""
import sys
import threading
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, TextIO

from tqdm import tqdm

_print_lock = threading.Lock()
_separator = " | "


class LogLevel(Enum):
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4


_current_level = LogLevel.INFO


def set_log_level(level: LogLevel) -> None:
    """Entries below `level` are dropped."""
    global _current_level
    _current_level = level


def _format_value(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        # Keep each entry on one line
        escaped = value.replace("\r", "\\r").replace("\n", "\\n").replace('"', '\\"')
        return f'"{escaped}"'
    return str(value)


def _format_fields(fields: Dict[str, Any]) -> str:
    return _separator.join(f"{key}={_format_value(value)}" for key, value in fields.items())


def _stream_for(level: LogLevel) -> TextIO:
    return sys.stderr if level.value >= LogLevel.WARN.value else sys.stdout


def _emit(line: str, stream: TextIO) -> None:
    try:
        tqdm.write(line, file=stream)
    except (OSError, ValueError):
        print(line, file=stream, flush=True)


def log(event: str, level: LogLevel = LogLevel.INFO, **fields) -> None:
    """
    Write one structured log entry.

    Args:
        event: Dotted event name, e.g. 'batch.start'
        level: Severity; entries below the current level are dropped
        **fields: Context written as key=value pairs, in the given order
    """
    if level.value < _current_level.value:
        return

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
    parts = [timestamp, f"[{level.name}]", event]
    if fields:
        parts.append(_format_fields(fields))

    with _print_lock:
        _emit(_separator.join(parts), _stream_for(level))


def safe_print(*args, **kwargs) -> None:
    """Plain console output that does not interleave with log entries."""
    with _print_lock:
        print(*args, **kwargs, flush=True)
