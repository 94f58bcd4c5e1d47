"""
A module providing constants, utility functions, and logging mechanisms
for WebM conversion tasks.

This module includes a collection of constants related to the conversion
workflow, utility functions for system operations such as command execution,
the persisted config store, the Pushover notifier and a structured logger.
"""

from .constants import (
    CONFIG_VERSION,
    CONTAINER_EXTENSION,
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    EXIT_OK,
    STATUS_DONE,
    STATUS_FAIL,
    STATUS_SKIP,
    THUMBNAIL_NAME,
)
from .logger import LogLevel

__all__ = [
    "CONFIG_VERSION",
    "CONTAINER_EXTENSION",
    "THUMBNAIL_NAME",
    "STATUS_DONE",
    "STATUS_FAIL",
    "STATUS_SKIP",
    "EXIT_OK",
    "EXIT_ERROR",
    "EXIT_INTERRUPTED",
    "LogLevel",
]
