"""
Versioned JSON config store for notification credentials.

The config file holds a JSON list with one record per schema version. Loading
looks up the record for the expected version; when it is missing a blank record
is appended and written to disk before returning, and records of other versions
are left exactly as they were.
"""
import dataclasses
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from webmconvert.utils import constants, logger
from webmconvert.utils.errors import StorageError
from webmconvert.utils.logger import LogLevel


@dataclass(frozen=True)
class AppConfig:
    version: int
    notification_token: str = ""
    notification_recipients: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "AppConfig":
        """
        Build a config from a stored record.

        Raises:
            StorageError: A credential field has the wrong type.
        """
        token = record.get("notification_token") or ""
        if not isinstance(token, str):
            raise StorageError(f"notification_token must be a string, got {type(token).__name__}")

        recipients = record.get("notification_recipients") or []
        if isinstance(recipients, str):
            recipients = [recipients]
        if not isinstance(recipients, list) or not all(isinstance(r, str) for r in recipients):
            raise StorageError("notification_recipients must be a list of strings")

        return cls(
            version=record["version"],
            notification_token=token,
            notification_recipients=tuple(r for r in recipients if r),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "notification_token": self.notification_token,
            "notification_recipients": list(self.notification_recipients),
        }


def config_path() -> Path:
    """Location of the config file, overridable with $WEBM_CONVERT_CONFIG."""
    override = os.getenv(constants.CONFIG_PATH_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / constants.CONFIG_FILE_NAME


def _read_records(path: Path) -> List[Dict[str, Any]]:
    if not path.exists():
        return []
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise StorageError(f"Could not read config file {path}: {e}") from e
    if not text.strip():
        return []
    try:
        data = json.loads(text)
    except ValueError as e:
        raise StorageError(f"Config file {path} is not valid JSON: {e}") from e
    if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
        raise StorageError(f"Config file {path} must contain a list of records")
    return data


def _write_records(path: Path, records: List[Dict[str, Any]]) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(records, fh, indent=2)
            fh.write("\n")
            fh.flush()
            os.fsync(fh.fileno())
    except OSError as e:
        raise StorageError(f"Could not write config file {path}: {e}") from e


def load_or_init(path: Optional[Path] = None, expected_version: int = constants.CONFIG_VERSION) -> AppConfig:
    """
    Load the config record for `expected_version`, creating it on first run.

    Args:
        path: Config file location (default: config_path())
        expected_version: Schema version to look up

    Returns:
        The stored record, or a blank one that has just been written to disk.

    Raises:
        StorageError: The file exists but is unreadable or corrupt.
    """
    path = Path(path) if path is not None else config_path()
    records = _read_records(path)

    for record in records:
        if record.get("version") == expected_version:
            try:
                config = AppConfig.from_record(record)
            except StorageError as e:
                raise StorageError(f"Config file {path} has an invalid record: {e}") from e
            logger.log("config.loaded", LogLevel.DEBUG, path=str(path), version=expected_version)
            return config

    logger.log("config.missing", LogLevel.INFO,
               msg=f"No version {expected_version} config found, creating a config",
               path=str(path))
    config = AppConfig(version=expected_version)
    records.append(config.to_record())
    _write_records(path, records)
    logger.log("config.created", LogLevel.INFO,
               msg="Fill in notification_token and notification_recipients, then restart "
                   "for changes to take effect",
               path=str(path),
               version=expected_version)
    return config


def apply_env_fallback(config: AppConfig) -> AppConfig:
    """
    Fill blank credentials from $PUSHOVER_TOKEN / $PUSHOVER_USER.

    PUSHOVER_USER may hold several comma-separated user keys. The stored config
    file is never rewritten; a new AppConfig is returned instead.
    """
    if config.notification_token:
        return config

    token = os.getenv(constants.PUSHOVER_TOKEN_ENV, "").strip()
    users = os.getenv(constants.PUSHOVER_USER_ENV, "")
    recipients = tuple(u.strip() for u in users.split(",") if u.strip())
    if not token:
        return config

    logger.log("config.env_credentials", LogLevel.DEBUG, recipients=len(recipients))
    return dataclasses.replace(
        config,
        notification_token=token,
        notification_recipients=recipients or config.notification_recipients,
    )
