import logging
from typing import Optional

import requests

from config import settings

logger = logging.getLogger(__name__)

PUSHOVER_MESSAGES_URL = "https://api.pushover.net/1/messages.json"
_MAX_MESSAGE_LEN = 1024


class PushoverAlerter:
    # Best-effort push notifications for operator attention.
    def __init__(
        self,
        token: Optional[str] = None,
        user: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout_sec: float = 5.0,
    ):
        self.token = settings.PUSHOVER_TOKEN if token is None else token
        self.user = settings.PUSHOVER_USER if user is None else user
        self.enabled = bool(self.token and self.user)
        self.session = session or requests.Session()
        self.timeout_sec = timeout_sec

    def try_send_notification(self, message: str) -> bool:
        """Send ``message``; returns False instead of raising when delivery fails."""
        if not self.enabled:
            logger.debug("Pushover disabled, dropping alert: %s", message)
            return False
        try:
            response = self.session.post(
                PUSHOVER_MESSAGES_URL,
                data={
                    "token": self.token,
                    "user": self.user,
                    "message": str(message)[:_MAX_MESSAGE_LEN],
                },
                timeout=self.timeout_sec,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Pushover notification failed: %s", e)
            return False
        return True
