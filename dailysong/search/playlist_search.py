import logging
from typing import Optional, Tuple

from config import settings
from dailysong.data.catalog import CatalogProvider
from dailysong.data.models import SearchPlaylistsResponse

logger = logging.getLogger(__name__)


def _as_int(value) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def normalize_paging(offset, limit) -> Tuple[int, int]:
    # Out-of-range values fall back to defaults instead of failing the request.
    parsed_offset = _as_int(offset)
    parsed_limit = _as_int(limit)
    if parsed_offset is None or parsed_offset < 0:
        parsed_offset = 0
    if parsed_limit is None or parsed_limit < 1 or parsed_limit > settings.SEARCH_MAX_LIMIT:
        parsed_limit = settings.SEARCH_DEFAULT_LIMIT
    return parsed_offset, parsed_limit


def search_playlists(
    provider: CatalogProvider, q: str, offset: int = 0, limit: int = 10
) -> SearchPlaylistsResponse:
    """
    Resolve ``q`` to playlist summaries.

    A bare playlist id or a playlist URL is looked up directly and returned as
    a single-item page; any other text goes to the provider's search.
    """
    playlist_id = provider.parse_playlist_reference(q)
    if playlist_id is not None:
        logger.info("Search query %r resolved to %s playlist %s", q, provider.name, playlist_id)
        return SearchPlaylistsResponse.single(provider.get_playlist_summary(playlist_id))
    return provider.search_playlists(q, offset, limit)
