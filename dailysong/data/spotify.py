import logging
import re
import time
from typing import List, Optional
from urllib.parse import urlparse

from config import settings
from dailysong.core.errors import UpstreamUnavailable
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

SPOTIFY_API_URL = "https://api.spotify.com/v1"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"

_SPOTIFY_ID_RE = re.compile(r"^[0-9A-Za-z]{22}$")
_PLAYLIST_URL_PREFIX = "https://open.spotify.com/playlist/"


class SpotifyCatalog(CatalogProvider):
    name = "spotify"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        alerter=None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.client_id = settings.SPOTIFY_CLIENT_ID if client_id is None else client_id
        self.client_secret = settings.SPOTIFY_CLIENT_SECRET if client_secret is None else client_secret
        self.alerter = alerter
        self.page_limit = settings.SPOTIFY_PAGE_LIMIT
        self._access_token = ""
        self._access_token_expires_at = 0.0

    # Client-credentials token, reused until shortly before it expires.
    def _get_access_token(self) -> str:
        if not (self.client_id and self.client_secret):
            raise UpstreamUnavailable("Spotify credentials are not configured")
        now = time.time()
        if self._access_token and now < (self._access_token_expires_at - 30):
            return self._access_token
        payload = self._request_json(
            "POST",
            SPOTIFY_TOKEN_URL,
            data={"grant_type": "client_credentials"},
            auth=(self.client_id, self.client_secret),
        )
        token = str(payload.get("access_token", "") or "").strip()
        if not token:
            raise UpstreamUnavailable("Spotify token response carried no access_token")
        expires_in = max(60, int(payload.get("expires_in") or 3600))
        self._access_token = token
        self._access_token_expires_at = now + expires_in
        return token

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        headers = {"Authorization": f"Bearer {self._get_access_token()}"}
        return self._request_json("GET", f"{SPOTIFY_API_URL}{path}", params=params, headers=headers)

    def _on_invalid_json(self, text: str) -> None:
        super()._on_invalid_json(text)
        if self.alerter is not None:
            self.alerter.try_send_notification(text)

    def get_playlist(self, playlist_id: str) -> dict:
        return self._get(f"/playlists/{playlist_id}")

    def get_tracks_paged(self, playlist_id: str, offset: int, limit: int) -> dict:
        return self._get(
            f"/playlists/{playlist_id}/tracks",
            params={"offset": offset, "limit": limit},
        )

    def fetch_all_tracks(self, playlist_id: str) -> List[Track]:
        options = []
        offset = 0
        limit = self.page_limit
        while True:
            page = self.get_tracks_paged(playlist_id, offset, limit)
            total = int(page.get("total") or 0)
            raw = [item.get("track") for item in page.get("items") or [] if item]
            options.extend(
                self.map_track(t)
                for t in raw
                if is_not_null(t) and property_is_not_null("preview_url")(t) and t.get("type") == "track"
            )
            offset += limit
            if offset >= total:
                break
        logger.info("Spotify playlist %s: %d usable tracks", playlist_id, len(options))
        return options

    @staticmethod
    def map_track(track: dict) -> Track:
        album = track.get("album") or {}
        images = album.get("images") or []
        release_date = str(album.get("release_date") or "0")
        return build_track(
            track_id=track["id"],
            name=track["name"],
            artists=[Artist(id=a.get("id") or "", name=a.get("name") or "") for a in track.get("artists") or []],
            year=int(release_date.split("-")[0]),
            preview_url=track["preview_url"],
            img_src=images[-1].get("url") if images else None,
        )

    def fetch_playlist_meta(self, playlist_id: str) -> Playlist:
        playlist = self.get_playlist(playlist_id)
        images = playlist.get("images") or []
        return Playlist(name=playlist.get("name", ""), imageUrl=images[-1].get("url") if images else None)

    @staticmethod
    def map_summary(item: dict) -> PlaylistSummary:
        return PlaylistSummary(
            id=item["id"],
            description=item.get("description") or "",
            images=[PlaylistImage(url=image["url"]) for image in item.get("images") or []],
            name=item["name"],
            owner=PlaylistOwner(display_name=(item.get("owner") or {}).get("display_name") or ""),
        )

    def get_playlist_summary(self, playlist_id: str) -> PlaylistSummary:
        return self.map_summary(self.get_playlist(playlist_id))

    def search_playlists(self, q: str, offset: int = 0, limit: int = 10) -> SearchPlaylistsResponse:
        data = self._get(
            "/search",
            params={"q": q, "type": "playlist", "offset": offset, "limit": limit},
        )
        playlists = data.get("playlists") or {}
        return SearchPlaylistsResponse(
            playlists=PlaylistPage(
                items=[self.map_summary(item) for item in playlists.get("items") or [] if item],
                offset=int(playlists.get("offset") or offset),
                total=int(playlists.get("total") or 0),
            )
        )

    def parse_playlist_reference(self, q: str) -> Optional[str]:
        value = (q or "").strip()
        if _SPOTIFY_ID_RE.match(value):
            return value
        if _PLAYLIST_URL_PREFIX in value:
            # e.g. https://open.spotify.com/playlist/1p3I3zrVPmJXbmYUcA7kJz?si=iNcr5LgOSG-JMLU6D-o84A
            path = urlparse(value).path.split("/")
            return path[-1] or None
        return None
