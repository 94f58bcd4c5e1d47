"""Exception hierarchy for startup, storage, notification and per-file conversion errors."""


class WebmConvertError(Exception):
    """Base exception for webm-convert errors."""

    pass


class UsageError(WebmConvertError):
    """Exception for bad or missing command-line input."""

    pass


class MissingDependencyError(WebmConvertError):
    """Exception for a required binary that is not on PATH."""

    def __init__(self, binary: str):
        super().__init__(f"'{binary}' not found on PATH. Install it to use this program.")
        self.binary = binary


class StorageError(WebmConvertError):
    """Exception for an unreadable or corrupt config file."""

    pass


class NotificationError(WebmConvertError):
    """Exception for a failed notification delivery."""

    pass


class ConversionError(WebmConvertError):
    """Base exception for failures that only affect a single file."""

    pass


class SpawnError(ConversionError):
    """Exception for an external command that could not be started."""

    def __init__(self, binary: str, reason: str):
        super().__init__(f"could not run '{binary}': {reason}")
        self.binary = binary


class IntegrityError(ConversionError):
    """Exception for diagnostic output found by a decode-only pass."""

    pass


class ProbeError(ConversionError):
    """Exception for a file whose resolution could not be probed."""

    pass


class EncodeError(ConversionError):
    """Exception for an encoder or cleaner that exited non-zero."""

    def __init__(self, message: str, exit_code: int):
        super().__init__(message)
        self.exit_code = exit_code
