import json
import logging

import pytest
import requests

from dailysong.core.alerts import PUSHOVER_MESSAGES_URL, PushoverAlerter
from dailysong.core.errors import UpstreamUnavailable, ZeroTracksError
from dailysong.core.event_log import EventLog, jsonify_error
from dailysong.data.catalog import get_catalog_provider
from dailysong.data.deezer import DeezerCatalog
from dailysong.data.spotify import SpotifyCatalog
from dailysong.search.playlist_search import normalize_paging, search_playlists
from dailysong.web_api.http_helpers import get_cache_control_header, get_cors_headers

from conftest import FakeResponse, ScriptedSession


def test_event_log_writes_json(caplog):
    caplog.set_level(logging.INFO, logger="dailysong.events")
    EventLog().log_info("req-1", "get-song:200", {"userSessionId": "abc"})
    record = json.loads(caplog.records[-1].getMessage())
    assert record["sessionId"] == "req-1"
    assert record["eventName"] == "get-song:200"
    assert record["level"] == "info"
    assert record["data"] == {"userSessionId": "abc"}


def test_event_log_error_level(caplog):
    caplog.set_level(logging.INFO, logger="dailysong.events")
    EventLog().log_error("req-2", "get-song:500")
    assert caplog.records[-1].levelno == logging.ERROR


def test_event_log_never_raises():
    class BrokenSink:
        def log(self, level, message):
            raise RuntimeError("disk full")

    EventLog(sink=BrokenSink()).log_info("req-3", "get-song:200", {"x": object()})


def test_jsonify_error():
    assert jsonify_error(ZeroTracksError("42")) == {
        "name": "ZeroTracksError",
        "message": "Playlist '42' has no usable tracks",
        "status": 500,
    }
    assert jsonify_error(KeyError("id")) == {"name": "KeyError", "message": "'id'"}


def test_alerter_disabled_without_credentials():
    session = ScriptedSession()
    alerter = PushoverAlerter(token="", user="", session=session)
    assert alerter.try_send_notification("hello") is False
    assert session.calls == []


def test_alerter_posts_message():
    session = ScriptedSession({("POST", PUSHOVER_MESSAGES_URL): FakeResponse({"status": 1})})
    alerter = PushoverAlerter(token="t", user="u", session=session)
    assert alerter.try_send_notification("get-song:500") is True
    assert session.calls[0][2]["data"] == {"token": "t", "user": "u", "message": "get-song:500"}


@pytest.mark.parametrize(
    "response", [FakeResponse({}, status_code=500), requests.ConnectionError("offline")]
)
def test_alerter_failure_returns_false(response):
    session = ScriptedSession({("POST", PUSHOVER_MESSAGES_URL): response})
    alerter = PushoverAlerter(token="t", user="u", session=session)
    assert alerter.try_send_notification("boom") is False


def test_get_catalog_provider():
    assert isinstance(get_catalog_provider("deezer"), DeezerCatalog)
    assert isinstance(get_catalog_provider(" Spotify "), SpotifyCatalog)
    with pytest.raises(ValueError):
        get_catalog_provider("napster")


@pytest.mark.parametrize(
    "offset,limit,expected",
    [(None, None, (0, 10)), ("5", "50", (5, 50)), ("-5", "500", (0, 10)), ("1.5", "x", (0, 10))],
)
def test_normalize_paging(offset, limit, expected):
    assert normalize_paging(offset, limit) == expected


def test_search_resolves_deezer_url():
    base = "https://api.deezer.com"
    playlist = {
        "id": 12,
        "title": "Rap",
        "picture": "a",
        "picture_small": "b",
        "picture_medium": "c",
        "picture_big": "d",
        "picture_xl": "e",
        "creator": {"name": "me"},
    }
    session = ScriptedSession({("GET", f"{base}/playlist/12"): FakeResponse(playlist)})
    catalog = DeezerCatalog(base_url=base, rapidapi_key="", session=session)

    response = search_playlists(catalog, "https://www.deezer.com/us/playlist/12")

    assert response.playlists.total == 1
    assert response.playlists.items[0].name == "Rap"


def test_search_propagates_provider_errors():
    base = "https://api.deezer.com"
    session = ScriptedSession({("GET", f"{base}/search/playlist"): FakeResponse({}, status_code=502)})
    catalog = DeezerCatalog(base_url=base, rapidapi_key="", session=session)
    with pytest.raises(UpstreamUnavailable):
        search_playlists(catalog, "chill")


def test_cors_headers():
    assert get_cors_headers("https://a.example", ["*"])["Access-Control-Allow-Origin"] == "*"
    echoed = get_cors_headers("https://a.example", ["https://a.example", "https://b.example"])
    assert echoed["Access-Control-Allow-Origin"] == "https://a.example"
    assert echoed["Vary"] == "Origin"
    assert get_cors_headers("https://evil.example", ["https://a.example"]) == {}
    assert get_cors_headers(None, ["https://a.example"]) == {}


def test_cache_control_header():
    assert get_cache_control_header(public=True, max_age_days=1) == {"Cache-Control": "public, max-age=86400"}
    assert get_cache_control_header(public=False) == {"Cache-Control": "private, max-age=0"}
