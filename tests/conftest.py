"""
Shared fixtures: a scripted requests session, an in-memory catalog, and
recorders standing in for the event log and the alerter.
"""
from typing import List, Optional

import pytest
import requests

from dailysong.core.errors import NotFound
from dailysong.data.catalog import CatalogProvider
from dailysong.data.models import (
    Artist,
    Playlist,
    PlaylistImage,
    PlaylistOwner,
    PlaylistPage,
    PlaylistSummary,
    SearchPlaylistsResponse,
    build_track,
)

INVALID_JSON = object()


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=""):
        self.payload = payload
        self.status_code = status_code
        self.text = text

    def json(self):
        if self.payload is INVALID_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class ScriptedSession:
    """Answers requests from a ``(method, url) -> response`` table and records every call."""

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        response = self.routes.get((method, url))
        if response is None:
            raise AssertionError(f"Unexpected request {method} {url}")
        if isinstance(response, Exception):
            raise response
        return response

    def post(self, url, **kwargs):
        return self.request("POST", url, **kwargs)

    def urls(self, method="GET"):
        return [url for m, url, _ in self.calls if m == method]


def make_track(track_id: str, preview: str = "https://cdn.example/p.mp3", year: int = 2015):
    return build_track(
        track_id=track_id,
        name=f"Song {track_id}",
        artists=[Artist(id=f"artist-{track_id}", name=f"Artist {track_id}")],
        year=year,
        preview_url=preview,
        img_src=f"https://cdn.example/{track_id}.jpg",
    )


class FakeCatalog(CatalogProvider):
    name = "fake"

    def __init__(self, tracks: Optional[List] = None, error: Optional[Exception] = None):
        super().__init__()
        self.tracks = list(tracks or [])
        self.error = error
        self.track_calls = 0
        self.meta_calls = 0
        self.search_calls = []
        self.summary_calls = []

    def fetch_all_tracks(self, playlist_id):
        self.track_calls += 1
        if self.error is not None:
            raise self.error
        return list(self.tracks)

    def fetch_playlist_meta(self, playlist_id):
        self.meta_calls += 1
        return Playlist(name=f"Playlist {playlist_id}", imageUrl="https://cdn.example/cover.jpg")

    def get_playlist_summary(self, playlist_id):
        self.summary_calls.append(playlist_id)
        if playlist_id == "404":
            raise NotFound("no such playlist")
        return PlaylistSummary(
            id=playlist_id,
            images=[PlaylistImage(url="https://cdn.example/cover.jpg")],
            name=f"Playlist {playlist_id}",
            description="",
            owner=PlaylistOwner(display_name="someone"),
        )

    def search_playlists(self, q, offset=0, limit=10):
        self.search_calls.append((q, offset, limit))
        summary = self.get_playlist_summary("7")
        return SearchPlaylistsResponse(playlists=PlaylistPage(items=[summary], offset=offset, total=31))

    def parse_playlist_reference(self, q):
        value = q.strip()
        return value if value.isdigit() else None

    @property
    def upstream_calls(self):
        return self.track_calls + self.meta_calls


class RecordingEventLog:
    def __init__(self):
        self.events = []

    def log_info(self, session_id, event_name, data=None):
        self.events.append(("info", session_id, event_name, data))

    def log_error(self, session_id, event_name, data=None):
        self.events.append(("error", session_id, event_name, data))

    def names(self):
        return [name for _, _, name, _ in self.events]


class RecordingAlerter:
    def __init__(self):
        self.messages = []

    def try_send_notification(self, message):
        self.messages.append(message)
        return True


@pytest.fixture
def five_tracks():
    return [make_track(letter) for letter in "ABCDE"]


@pytest.fixture
def fake_catalog(five_tracks):
    return FakeCatalog(five_tracks)
