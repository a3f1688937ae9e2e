import logging
import re
from datetime import date, datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Optional

from dailysong.core.errors import ZeroTracksError
from dailysong.data.catalog import CatalogProvider
from dailysong.data.models import SelectionResult
from dailysong.selection.cache import ResultCache, SelectionKey
from dailysong.selection.shuffle import seeded_shuffle, select_daily_index

logger = logging.getLogger(__name__)

DAY_IN_MS = 24 * 60 * 60 * 1000
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)
_FRACTION_RE = re.compile(r"(?<=\d\d:\d\d:\d\d)\.(\d+)")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: str) -> Optional[datetime]:
    text = value.strip()
    if not text:
        return None
    try:
        if len(text) == 10:
            parsed_date = date.fromisoformat(text)
            return datetime(parsed_date.year, parsed_date.month, parsed_date.day, tzinfo=timezone.utc)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        # fromisoformat before 3.11 only takes 3- or 6-digit fractions.
        text = _FRACTION_RE.sub(lambda m: "." + m.group(1).ljust(6, "0")[:6], text, count=1)
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError):
        return None


def parse_date_millis(date_input: Optional[str], now: Callable[[], datetime] = _utc_now) -> int:
    """
    Milliseconds since the epoch for ``date_input``.

    Accepts ISO-8601 dates and datetimes (naive values are read as UTC) and
    RFC 2822 strings. Anything else, including None or "", silently falls back
    to ``now()`` so a bad date yields today's puzzle rather than an error.
    """
    parsed = _parse_datetime(date_input) if isinstance(date_input, str) else None
    if parsed is None:
        parsed = now()
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return (parsed - _EPOCH) // _ONE_MS


def days_since_epoch(timestamp_millis: int) -> int:
    return timestamp_millis // DAY_IN_MS


class DailySelector:
    def __init__(
        self,
        provider: CatalogProvider,
        cache: Optional[ResultCache] = None,
        now: Callable[[], datetime] = _utc_now,
    ):
        self.provider = provider
        self.cache = cache if cache is not None else ResultCache()
        self.now = now

    def resolve(self, playlist_id: str, date_input: Optional[str] = None) -> SelectionResult:
        full_days = days_since_epoch(parse_date_millis(date_input, now=self.now))
        return self.get_result(SelectionKey(playlist_id, full_days))

    def get_result(self, key: SelectionKey) -> SelectionResult:
        cached = self.cache.get(key)
        if cached is not None:
            logger.info("Getting result from cache for %s", key)
            return cached
        logger.info("Getting result fresh for %s", key)
        fresh = self.get_result_fresh(key)
        self.cache.put(key, fresh)
        return fresh

    def get_result_fresh(self, key: SelectionKey) -> SelectionResult:
        playlist_id = key.playlist_id
        all_tracks = self.provider.fetch_all_tracks(playlist_id)
        playlist = self.provider.fetch_playlist_meta(playlist_id)
        if not all_tracks:
            raise ZeroTracksError(playlist_id)

        index = select_daily_index(key.full_days_since_epoch, len(all_tracks))
        # The answer comes from the shuffled order while options keep catalog order.
        answer = seeded_shuffle(all_tracks, playlist_id)[index]
        return SelectionResult(answer=answer, options=all_tracks, playlist=playlist)


def resolve_daily_selection(
    playlist_id: str,
    date_input: Optional[str],
    provider: CatalogProvider,
    cache: ResultCache,
) -> SelectionResult:
    return DailySelector(provider, cache).resolve(playlist_id, date_input)
