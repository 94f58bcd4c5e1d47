"""
A batch WebM conversion package built around external media tools.

This package converts video files to WebM (VP9) with ffmpeg, one title per output
folder, and reports progress through Pushover notifications. Encoding, probing,
thumbnailing and integrity checks are all delegated to external binaries; this
package only sequences them.

The package is organized into two categories:
- Transcoding: resolution profiles, ffmpeg command building, integrity checks,
  progress reporting and the sequential batch converter.
- Utilities: constants, structured logging, command execution, the persisted
  config store and the Pushover notifier.
"""

__version__ = "2.0.0"

__all__ = ["__version__"]
