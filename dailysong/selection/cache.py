import logging
import threading
from collections import OrderedDict
from typing import NamedTuple, Optional

from dailysong.data.models import SelectionResult

logger = logging.getLogger(__name__)


class SelectionKey(NamedTuple):
    playlist_id: str
    full_days_since_epoch: int


class ResultCache:
    """
    In-process memo of daily selections.

    Entries live for the lifetime of the process unless ``max_entries`` is set,
    in which case the oldest insertions are dropped first.
    """

    def __init__(self, max_entries: int = 0):
        self.max_entries = max(0, int(max_entries or 0))
        self._entries: "OrderedDict[SelectionKey, SelectionResult]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: SelectionKey) -> Optional[SelectionResult]:
        return self._entries.get(key)

    def put(self, key: SelectionKey, value: SelectionResult) -> None:
        with self._lock:
            self._entries[key] = value
            if self.max_entries:
                while len(self._entries) > self.max_entries:
                    evicted, _ = self._entries.popitem(last=False)
                    logger.info("Evicted cached result for %s", evicted)

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    def stats(self) -> dict:
        return {
            "backend": "in-memory",
            "cached_results": len(self._entries),
            "max_entries": self.max_entries or None,
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key) -> bool:
        return key in self._entries
