import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import requests

from config import settings
from dailysong.core.errors import NotFound, UpstreamUnavailable
from dailysong.data.models import Playlist, PlaylistSummary, SearchPlaylistsResponse, Track

logger = logging.getLogger(__name__)


def is_not_null(value) -> bool:
    return value is not None


def property_is_not_null(prop_key: str):
    # Builds a filter predicate rejecting tracks whose ``prop_key`` is None or empty.
    def _check(value: dict) -> bool:
        prop = value.get(prop_key)
        return prop is not None and prop != ""

    return _check


class CatalogProvider(ABC):
    """Music catalog the daily selector and playlist search read from."""

    name = "catalog"

    def __init__(self, session: Optional[requests.Session] = None, timeout_sec: Optional[float] = None):
        self.session = session or requests.Session()
        self.timeout_sec = timeout_sec or settings.CATALOG_TIMEOUT_SEC

    @abstractmethod
    def fetch_all_tracks(self, playlist_id: str) -> List[Track]:
        """Every usable track of the playlist, in catalog order."""

    @abstractmethod
    def fetch_playlist_meta(self, playlist_id: str) -> Playlist:
        ...

    @abstractmethod
    def get_playlist_summary(self, playlist_id: str) -> PlaylistSummary:
        ...

    @abstractmethod
    def search_playlists(self, q: str, offset: int = 0, limit: int = 10) -> SearchPlaylistsResponse:
        ...

    @abstractmethod
    def parse_playlist_reference(self, q: str) -> Optional[str]:
        """Playlist id when ``q`` is a bare id or a playlist URL for this provider, else None."""

    def _request_json(self, method: str, url: str, **kwargs):
        kwargs.setdefault("timeout", self.timeout_sec)
        try:
            response = self.session.request(method, url, **kwargs)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise UpstreamUnavailable(f"{self.name} request failed: {e}") from e

        if response.status_code == 404:
            raise NotFound(f"{self.name} resource not found: {url}")
        if response.status_code == 429 or response.status_code >= 500:
            raise UpstreamUnavailable(
                f"{self.name} responded {response.status_code} for {url}"
            )
        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise UpstreamUnavailable(str(e)) from e

        try:
            return response.json()
        except ValueError as e:
            self._on_invalid_json(response.text)
            raise UpstreamUnavailable(f"{self.name} returned a non-JSON body: {response.text[:200]}") from e

    def _on_invalid_json(self, text: str) -> None:
        logger.error("%s returned a non-JSON body: %s", self.name, text[:200])


def get_catalog_provider(name: Optional[str] = None, **kwargs) -> CatalogProvider:
    from dailysong.data.deezer import DeezerCatalog
    from dailysong.data.spotify import SpotifyCatalog

    providers = {
        DeezerCatalog.name: DeezerCatalog,
        SpotifyCatalog.name: SpotifyCatalog,
    }
    key = (name or settings.CATALOG_PROVIDER or "deezer").strip().lower()
    if key not in providers:
        raise ValueError(f"Unknown catalog provider {key!r}; expected one of {sorted(providers)}")
    return providers[key](**kwargs)
