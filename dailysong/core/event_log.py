import json
import logging
import time
from typing import Optional

logger = logging.getLogger(__name__)
events_logger = logging.getLogger("dailysong.events")


def jsonify_error(error: BaseException) -> dict:
    payload = {
        "name": type(error).__name__,
        "message": str(getattr(error, "message", "") or error),
    }
    status = getattr(error, "status", None)
    if status is not None:
        payload["status"] = status
    return payload


class EventLog:
    """
    Structured request events, one JSON line per event.

    Logging is fire-and-forget: a record that cannot be serialized or emitted
    is reported on this module's logger and otherwise dropped.
    """

    def __init__(self, sink: Optional[logging.Logger] = None):
        self.sink = sink or events_logger

    def _write(self, level: int, level_name: str, session_id: str, event_name: str, data: Optional[dict]):
        record = {
            "level": level_name,
            "sessionId": session_id,
            "eventName": event_name,
            "timestamp": round(time.time(), 3),
            "data": data or {},
        }
        try:
            self.sink.log(level, json.dumps(record, default=str))
        except Exception:
            logger.exception("Failed to write event %s", event_name)

    def log_info(self, session_id: str, event_name: str, data: Optional[dict] = None):
        self._write(logging.INFO, "info", session_id, event_name, data)

    def log_error(self, session_id: str, event_name: str, data: Optional[dict] = None):
        self._write(logging.ERROR, "error", session_id, event_name, data)
