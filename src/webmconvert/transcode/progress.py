"""
Per-file progress ticker and its console display.

The ticker counts seconds of wall-clock work on a background thread and hands a
ProgressSnapshot to a sink on every tick. It has no say in control flow; the
batch converter only reads the final count after stopping it.
"""
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from tqdm import tqdm

from webmconvert.utils.time_util import format_duration


@dataclass(frozen=True)
class ProgressSnapshot:
    file_index: int
    total_files: int
    elapsed_seconds: int
    resolution: Optional[int]
    title: str

    def describe(self) -> str:
        resolution = f"{self.resolution}p" if self.resolution else "probing"
        return (f"[File {self.file_index} of {self.total_files}] "
                f"[{format_duration(self.elapsed_seconds)}] [{resolution}] Converting: {self.title}...")


ProgressSink = Callable[[ProgressSnapshot], None]


class ProgressTicker:
    """Counts elapsed seconds for one file and publishes a snapshot on each tick."""

    def __init__(self, file_index: int, total_files: int, title: str,
                 sink: Optional[ProgressSink] = None, interval: float = 1.0):
        self.file_index = file_index
        self.total_files = total_files
        self.title = title
        self.resolution: Optional[int] = None
        self.elapsed_seconds = 0
        self._sink = sink
        self._interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def snapshot(self) -> ProgressSnapshot:
        return ProgressSnapshot(
            file_index=self.file_index,
            total_files=self.total_files,
            elapsed_seconds=self.elapsed_seconds,
            resolution=self.resolution,
            title=self.title,
        )

    def _publish(self) -> None:
        if self._sink is not None:
            self._sink(self.snapshot())

    def _run(self) -> None:
        while not self._stop.wait(self._interval):
            self.elapsed_seconds += 1
            self._publish()

    def start(self) -> "ProgressTicker":
        self._publish()
        self._thread = threading.Thread(target=self._run, name=f"ticker-{self.file_index}", daemon=True)
        self._thread.start()
        return self

    def stop(self) -> int:
        """Cancel the ticker and return the elapsed second count."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        return self.elapsed_seconds


class ConsoleProgress:
    """Single-line tqdm status display fed by ProgressTicker snapshots."""

    def __init__(self):
        self._bar: Optional[tqdm] = None
        self._lock = threading.Lock()

    def __call__(self, snapshot: ProgressSnapshot) -> None:
        with self._lock:
            if self._bar is None:
                self._bar = tqdm(total=0, bar_format="{desc}", leave=False)
            self._bar.set_description_str(snapshot.describe())

    def close(self) -> None:
        with self._lock:
            if self._bar is not None:
                self._bar.close()
                self._bar = None
