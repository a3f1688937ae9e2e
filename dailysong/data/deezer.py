import logging
import re
from datetime import datetime, timezone
from typing import Dict, List, Optional

from config import settings
from dailysong.core.errors import NotFound, SearchNotSupported, UpstreamUnavailable
from dailysong.data.catalog import CatalogProvider, is_not_null, property_is_not_null
from dailysong.data.models import (
    Artist,
    Playlist,
    PlaylistImage,
    PlaylistOwner,
    PlaylistPage,
    PlaylistSummary,
    SearchPlaylistsResponse,
    Track,
    build_track,
)

logger = logging.getLogger(__name__)

_PLAYLIST_URL_RE = re.compile(r"^https://www\.deezer\.com/[a-z]{2}/playlist/(\d+)$", re.I)
_PLAYLIST_ID_RE = re.compile(r"^\d+$")
# Deezer answers 200 with {"error": {"code": 800, ...}} when an entity does not exist.
_NO_DATA_CODE = 800


class DeezerCatalog(CatalogProvider):
    name = "deezer"

    def __init__(
        self,
        base_url: Optional[str] = None,
        rapidapi_key: Optional[str] = None,
        alerter=None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.base_url = (base_url or settings.DEEZER_API_BASE_URL).rstrip("/")
        self.rapidapi_key = settings.X_RAPIDAPI_KEY_DEEZER if rapidapi_key is None else rapidapi_key
        self.alerter = alerter

    def _headers(self) -> Dict[str, str]:
        if not self.rapidapi_key:
            return {}
        return {
            "x-rapidapi-key": self.rapidapi_key,
            "x-rapidapi-host": settings.DEEZER_RAPIDAPI_HOST,
        }

    def _get(self, url: str, params: Optional[dict] = None) -> dict:
        data = self._request_json("GET", url, params=params, headers=self._headers())
        error = data.get("error") if isinstance(data, dict) else None
        if error:
            message = f"Deezer error for {url}: {error.get('type', '')} {error.get('message', '')}".strip()
            if error.get("code") == _NO_DATA_CODE:
                raise NotFound(message)
            raise UpstreamUnavailable(message)
        return data

    def get_playlist(self, playlist_id: str) -> dict:
        return self._get(f"{self.base_url}/playlist/{playlist_id}")

    def fetch_all_tracks(self, playlist_id: str) -> List[Track]:
        playlist = self.get_playlist(playlist_id)
        page = playlist.get("tracks") or {}
        raw_tracks = list(page.get("data") or [])

        next_url = page.get("next")
        while next_url:
            page = self._get(next_url)
            raw_tracks.extend(page.get("data") or [])
            next_url = page.get("next")

        tracks = [
            self.map_track(t)
            for t in raw_tracks
            if is_not_null(t) and property_is_not_null("preview")(t) and t.get("type") == "track"
        ]
        logger.info("Deezer playlist %s: %d usable of %d tracks", playlist_id, len(tracks), len(raw_tracks))
        return tracks

    @staticmethod
    def map_track(track: dict) -> Track:
        artist = track.get("artist") or {}
        added_at = datetime.fromtimestamp(int(track.get("time_add") or 0), tz=timezone.utc)
        return build_track(
            track_id=track["id"],
            name=track["title"],
            artists=[Artist(id=artist.get("id") or "", name=artist.get("name") or "")],
            year=added_at.year,
            preview_url=track["preview"],
            img_src=(track.get("album") or {}).get("cover_xl"),
        )

    def fetch_playlist_meta(self, playlist_id: str) -> Playlist:
        playlist = self.get_playlist(playlist_id)
        return Playlist(name=playlist.get("title", ""), imageUrl=playlist.get("picture_xl"))

    @staticmethod
    def map_summary(item: dict) -> PlaylistSummary:
        # Search results carry "user" where playlist lookups carry "creator".
        owner = item.get("creator") or item.get("user") or {}
        images = [
            item.get("picture"),
            item.get("picture_small"),
            item.get("picture_medium"),
            item.get("picture_big"),
            item.get("picture_xl"),
        ]
        return PlaylistSummary(
            id=str(item["id"]),
            description=item.get("description") or "",
            images=[PlaylistImage(url=url) for url in images],
            name=item["title"],
            owner=PlaylistOwner(display_name=owner.get("name") or ""),
        )

    def get_playlist_summary(self, playlist_id: str) -> PlaylistSummary:
        return self.map_summary(self.get_playlist(playlist_id))

    def search_playlists(self, q: str, offset: int = 0, limit: int = 10) -> SearchPlaylistsResponse:
        if self.rapidapi_key:
            # The RapidAPI proxy only mirrors entity lookups, not /search/playlist.
            text = "Playlist search is not provided by the Deezer RapidAPI proxy"
            if self.alerter is not None:
                self.alerter.try_send_notification(f"({self.base_url}/search/playlist) {text}")
            raise SearchNotSupported(text)
        data = self._get(
            f"{self.base_url}/search/playlist",
            params={"q": q, "index": offset, "limit": limit},
        )
        items = [self.map_summary(item) for item in data.get("data") or [] if item]
        return SearchPlaylistsResponse(
            playlists=PlaylistPage(items=items, offset=offset, total=int(data.get("total") or 0))
        )

    def parse_playlist_reference(self, q: str) -> Optional[str]:
        value = (q or "").strip()
        if _PLAYLIST_ID_RE.match(value):
            return value
        match = _PLAYLIST_URL_RE.match(value)
        if match:
            return match.group(1)
        return None
