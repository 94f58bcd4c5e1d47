"""WebM transcoding functionality.

This package provides two levels of functionality:
- core, integrity, resolution: Low-level ffmpeg utilities (probing, profile
  matching, command building, decode-only integrity checks)
- batch, progress: High-level orchestration (sequential per-file pipeline,
  progress ticker, batch summary)
"""

from .core import (
    VideoInfo,
    build_ffmpeg_cmd,
    ffprobe_video_info,
    generate_thumbnail,
    optimize_webm,
    probe_height,
    transcode_video,
)
from .integrity import check_integrity
from .resolution import PROFILES, SUPPORTED_HEIGHTS, ResolutionProfile, match
from .progress import ConsoleProgress, ProgressSnapshot, ProgressTicker
from .batch import BatchConverter, BatchSummary, ConversionTask, FileResult

__all__ = [
    # Video info
    "VideoInfo",
    "ffprobe_video_info",
    "probe_height",
    # Resolution profiles
    "PROFILES",
    "SUPPORTED_HEIGHTS",
    "ResolutionProfile",
    "match",
    # Transcoding
    "build_ffmpeg_cmd",
    "transcode_video",
    "generate_thumbnail",
    "optimize_webm",
    "check_integrity",
    # Orchestration
    "BatchConverter",
    "BatchSummary",
    "ConversionTask",
    "FileResult",
    "ConsoleProgress",
    "ProgressSnapshot",
    "ProgressTicker",
]
