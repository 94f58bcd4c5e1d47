"""
Pushover client for batch progress notifications.

Notifications are fire-and-forget: delivery failures are logged and never
raised, so a flaky network cannot stop a batch.
"""

from typing import Optional

import requests

from webmconvert.utils import constants, logger
from webmconvert.utils.config_store import AppConfig
from webmconvert.utils.errors import NotificationError
from webmconvert.utils.logger import LogLevel


class PushoverNotifier:
    """Sends a message to every configured Pushover recipient."""

    def __init__(self, config: AppConfig, session: Optional[requests.Session] = None):
        self.token = config.notification_token
        self.recipients = tuple(config.notification_recipients)
        self.session = session or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.token and self.recipients)

    def _post(self, payload: dict) -> None:
        """Post one message and raise NotificationError on any delivery failure."""
        try:
            response = self.session.post(constants.PUSHOVER_URL, data=payload, timeout=constants.PUSHOVER_TIMEOUT)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise NotificationError(f"Request failed: {e}")

    def notify(self, message: str, is_error: bool = False) -> None:
        """Send `message` to each recipient; an error adds the alert sound."""
        if not self.enabled:
            logger.log("notify.unconfigured", LogLevel.INFO,
                       msg="notification_token or notification_recipients is not set",
                       config=constants.CONFIG_FILE_NAME)
            return

        for user in self.recipients:
            payload = {"token": self.token, "user": user, "message": message}
            if is_error:
                payload["sound"] = constants.PUSHOVER_ERROR_SOUND
            try:
                self._post(payload)
            except NotificationError as e:
                logger.log("notify.failed", LogLevel.WARN, user=user, error=str(e))
            else:
                logger.log("notify.sent", LogLevel.DEBUG, user=user, error_alert=is_error)
