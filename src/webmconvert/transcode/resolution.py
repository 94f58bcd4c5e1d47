"""
Resolution profiles for VP9 encoding.

Each supported output height carries a constant-quality value (lower is better
quality) and tiling/thread parallelism settings. A probed height that is not in
the table resolves to the nearest supported height; ties go to the lower one.
"""
from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class ResolutionProfile:
    height: int
    quality: int
    tile_columns: int
    threads: int

    @property
    def encoder_params(self) -> List[str]:
        """Resolution-specific ffmpeg flags, in order."""
        return [
            "-crf", str(self.quality),
            "-tile-columns", str(self.tile_columns),
            "-threads", str(self.threads),
        ]


# Ascending by height; the tie-break in match() relies on this order.
PROFILES: Tuple[ResolutionProfile, ...] = (
    ResolutionProfile(height=360, quality=36, tile_columns=1, threads=4),
    ResolutionProfile(height=480, quality=33, tile_columns=1, threads=4),
    ResolutionProfile(height=720, quality=32, tile_columns=2, threads=8),
    ResolutionProfile(height=1080, quality=31, tile_columns=2, threads=8),
)

SUPPORTED_HEIGHTS: Tuple[int, ...] = tuple(p.height for p in PROFILES)

_BY_HEIGHT: Dict[int, ResolutionProfile] = {p.height: p for p in PROFILES}


def match(probed_height: int) -> ResolutionProfile:
    """Return the profile for `probed_height`, or the nearest supported one."""
    if isinstance(probed_height, bool) or not isinstance(probed_height, int) or probed_height <= 0:
        raise ValueError(f"Invalid video height: {probed_height!r}")

    exact = _BY_HEIGHT.get(probed_height)
    if exact is not None:
        return exact

    # min() keeps the first minimal item, so equal distances resolve to the lower height
    return min(PROFILES, key=lambda p: abs(p.height - probed_height))
