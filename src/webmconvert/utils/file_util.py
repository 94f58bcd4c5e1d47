"""
Path utilities for input expansion and the per-title output layout.

Each converted title gets its own folder under the output root, holding
`<title>.webm` and optionally the `background.jpg` thumbnail.
"""
import glob
from pathlib import Path
from typing import Iterable, List

from webmconvert.utils.constants import CONTAINER_EXTENSION, THUMBNAIL_NAME, UNOPTIMIZED_SUFFIX

_GLOB_CHARS = set("*?[")


def title_for(path: Path) -> str:
    """Return the title of a source file: its base name without extension."""
    return path.stem


def expand_inputs(inputs: Iterable[str]) -> List[Path]:
    """
    Turn command-line inputs into an ordered list of paths.

    Arguments that exist are kept as-is. An argument that does not exist but
    contains glob characters is expanded in sorted order; a pattern with no
    matches is dropped.
    """
    paths: List[Path] = []
    for raw in inputs:
        path = Path(raw).expanduser()
        if not path.exists() and _GLOB_CHARS & set(raw):
            paths.extend(Path(p) for p in sorted(glob.glob(str(path))))
        else:
            paths.append(path)
    return paths


def output_dir_for(output_root: Path, title: str) -> Path:
    return output_root / title


def output_file_for(output_dir: Path, title: str) -> Path:
    return output_dir / f"{title}.{CONTAINER_EXTENSION}"


def unoptimized_file_for(output_dir: Path, title: str) -> Path:
    return output_dir / f"{title}{UNOPTIMIZED_SUFFIX}.{CONTAINER_EXTENSION}"


def thumbnail_file_for(output_dir: Path) -> Path:
    return output_dir / THUMBNAIL_NAME


def prepare_output_dir(output_root: Path, title: str) -> Path:
    """Create (if needed) and return the output folder for a title."""
    output_dir = output_dir_for(output_root, title)
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir
