"""
This module provides the sequential batch converter.

Files are converted strictly one at a time, in the order given: each file is
integrity-checked, probed, encoded and verified before the next one starts.
Failures are contained at the file boundary, notified, and recorded in the
batch summary; an interrupt stops the whole batch.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from webmconvert.utils import STATUS_DONE, STATUS_FAIL, STATUS_SKIP, LogLevel, file_util, logger
from webmconvert.utils.config_store import AppConfig
from webmconvert.utils.errors import ConversionError, IntegrityError
from webmconvert.utils.pushover import PushoverNotifier
from webmconvert.utils.time_util import format_duration
from . import core, integrity
from .progress import ProgressSink, ProgressTicker
from .resolution import ResolutionProfile, match


@dataclass
class ConversionTask:
    """Working state for one file; owned by the iteration converting it."""
    index: int
    source_path: Path
    title: str
    output_directory: Path
    output_path: Path
    elapsed_seconds: int = 0
    profile: Optional[ResolutionProfile] = None


@dataclass
class FileResult:
    source_path: Path
    title: str
    status: str
    elapsed_seconds: int = 0
    message: str = ""


@dataclass
class BatchSummary:
    total_files: int = 0
    total_elapsed_seconds: int = 0
    results: List[FileResult] = field(default_factory=list)

    def _count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def done(self) -> int:
        return self._count(STATUS_DONE)

    @property
    def failed(self) -> int:
        return self._count(STATUS_FAIL)

    @property
    def skipped(self) -> int:
        return self._count(STATUS_SKIP)

    def message(self) -> str:
        text = f"Finished converting {self.total_files} files (Took {format_duration(self.total_elapsed_seconds)})."
        if self.failed:
            text += f" {self.failed} failed."
        return text


class BatchConverter:
    """Drives the per-file conversion pipeline over a list of inputs."""

    def __init__(
            self,
            config: AppConfig,
            output_root: Path,
            resolution: Optional[int] = None,
            optimize: bool = False,
            notifier: Optional[PushoverNotifier] = None,
            tick_interval: float = 1.0,
            progress: Optional[ProgressSink] = None,
    ):
        """
        Initialize the batch converter.

        Args:
            config: Loaded app config; only read, never changed
            output_root: Folder that receives one sub-folder per title
            resolution: Force this profile height instead of probing each file
            optimize: Run mkclean over each encoded file
            notifier: Notification channel (default: Pushover from `config`)
            tick_interval: Seconds between progress ticks
            progress: Sink receiving progress snapshots
        """
        self.config = config
        self.output_root = Path(output_root)
        self.forced_profile = match(resolution) if resolution is not None else None
        self.optimize = optimize
        self.notifier = notifier or PushoverNotifier(config)
        self.tick_interval = tick_interval
        self.progress = progress

    def run(self, paths: Iterable[Path]) -> BatchSummary:
        """Convert every path in order and return the batch summary."""
        files = [Path(p) for p in paths]
        summary = BatchSummary(total_files=len(files))

        logger.log("batch.start", LogLevel.INFO,
                   files=len(files),
                   output=str(self.output_root),
                   resolution=self.forced_profile.height if self.forced_profile else "auto",
                   optimize=self.optimize)

        try:
            for index, path in enumerate(files, 1):
                result = self._convert_one(index, len(files), path)
                summary.results.append(result)
                summary.total_elapsed_seconds += result.elapsed_seconds
        except KeyboardInterrupt:
            logger.log("batch.interrupted", LogLevel.WARN,
                       completed=len(summary.results),
                       total=len(files))
            self.notifier.notify("Conversion interrupted.", is_error=True)
            raise

        message = summary.message()
        logger.log("batch.end", LogLevel.INFO,
                   files=summary.total_files,
                   done=summary.done,
                   failed=summary.failed,
                   skipped=summary.skipped,
                   took=format_duration(summary.total_elapsed_seconds))
        self.notifier.notify(message, is_error=summary.failed > 0)
        return summary

    def _new_task(self, index: int, path: Path) -> ConversionTask:
        title = file_util.title_for(path)
        output_directory = file_util.output_dir_for(self.output_root, title)
        return ConversionTask(
            index=index,
            source_path=path,
            title=title,
            output_directory=output_directory,
            output_path=file_util.output_file_for(output_directory, title),
        )

    def _convert_one(self, index: int, total: int, path: Path) -> FileResult:
        """Run one file through the pipeline; per-file errors end up in the result."""
        task = self._new_task(index, path)

        if path.is_dir():
            logger.log("file.skipped", LogLevel.INFO, file=str(path), reason="directory")
            return FileResult(path, task.title, STATUS_SKIP, message="is a directory")

        ticker = ProgressTicker(index, total, task.title, sink=self.progress, interval=self.tick_interval)
        ticker.resolution = self.forced_profile.height if self.forced_profile else None
        ticker.start()
        failure: Optional[Exception] = None
        try:
            self._pipeline(task, ticker)
        except (ConversionError, OSError) as e:
            failure = e
        finally:
            # Stopped before the next file starts so ticks never leak across files
            task.elapsed_seconds = ticker.stop()

        if failure is not None:
            message = f"Failed converting: {task.title} ({failure})"
            logger.log("file.failed", LogLevel.ERROR,
                       index=f"{index}/{total}",
                       file=str(path),
                       error_type=type(failure).__name__,
                       error=str(failure))
            self.notifier.notify(message, is_error=True)
            return FileResult(path, task.title, STATUS_FAIL, task.elapsed_seconds, message)

        message = f"Done converting: {task.title} (Took {format_duration(task.elapsed_seconds)})"
        logger.log("file.done", LogLevel.INFO,
                   index=f"{index}/{total}",
                   file=str(path),
                   output=str(task.output_path),
                   resolution=f"{task.profile.height}p",
                   took=format_duration(task.elapsed_seconds))
        self.notifier.notify(message)
        return FileResult(path, task.title, STATUS_DONE, task.elapsed_seconds, message)

    def _pipeline(self, task: ConversionTask, ticker: ProgressTicker) -> None:
        src = task.source_path
        if not src.exists():
            raise ConversionError("source file not found")

        if integrity.check_integrity(src):
            raise IntegrityError("integrity error in source file")

        if self.forced_profile is not None:
            task.profile = self.forced_profile
        else:
            height = core.probe_height(src)
            task.profile = match(height)
            logger.log("file.probed", LogLevel.DEBUG, file=src.name, height=height, profile=task.profile.height)
        ticker.resolution = task.profile.height

        file_util.prepare_output_dir(self.output_root, task.title)
        core.generate_thumbnail(src, file_util.thumbnail_file_for(task.output_directory))

        if self.optimize:
            unoptimized = file_util.unoptimized_file_for(task.output_directory, task.title)
            core.transcode_video(src, unoptimized, task.profile)
            core.optimize_webm(unoptimized, task.output_path)
        else:
            core.transcode_video(src, task.output_path, task.profile)

        # A damaged output is reported but kept on disk for inspection
        if integrity.check_integrity(task.output_path):
            raise IntegrityError(f"integrity error in output {task.output_path.name}")
