import json
import logging
import uuid

from flask import Flask, g, request
from werkzeug.exceptions import HTTPException

from config import settings
from dailysong.core.alerts import PushoverAlerter
from dailysong.core.event_log import EventLog, jsonify_error
from dailysong.data.catalog import get_catalog_provider
from dailysong.search.playlist_search import normalize_paging, search_playlists
from dailysong.selection.cache import ResultCache
from dailysong.selection.daily import DailySelector
from dailysong.web_api.http_helpers import get_cache_control_header, get_cors_headers

logger = logging.getLogger(__name__)


def _json_response(app, payload, status=200, headers=None):
    response = app.response_class(
        json.dumps(payload, indent=2),
        status=status,
        mimetype="application/json",
    )
    for key, value in (headers or {}).items():
        response.headers[key] = value
    return response


def _request_event():
    return {
        "method": request.method,
        "url": request.url,
        "path": request.path,
        "queryStringParameters": request.args.to_dict(),
        "remoteAddr": request.remote_addr,
        "userAgent": request.headers.get("User-Agent", ""),
    }


def create_app(selector=None, provider=None, event_log=None, alerter=None):
    """
    Build the Flask app.

    Collaborators default to the configured catalog provider, a fresh
    process-wide result cache, the structured event log and Pushover alerts.
    """
    alerter = alerter or PushoverAlerter()
    if selector is None:
        provider = provider or get_catalog_provider(alerter=alerter)
        selector = DailySelector(provider, ResultCache(settings.RESULT_CACHE_MAX_ENTRIES))
    provider = provider or selector.provider
    event_log = event_log or EventLog()

    app = Flask(__name__)
    app.config["DAILY_SELECTOR"] = selector
    app.config["CATALOG_PROVIDER"] = provider

    @app.before_request
    def _assign_request_id():
        g.request_id = str(uuid.uuid4())
        g.user_session_id = request.cookies.get("sid")

    @app.after_request
    def _set_cors_headers(response):
        cors = get_cors_headers(request.headers.get("Origin"), settings.CORS_ALLOWED_ORIGINS)
        for key, value in cors.items():
            response.headers.setdefault(key, value)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return error
        logger.exception("Unhandled error on %s", request.path)
        return _json_response(app, {"error": jsonify_error(error)}, status=500)

    @app.route("/health", methods=["GET"])
    def health():
        return _json_response(
            app, {"status": "healthy", "cached_results": len(selector.cache)}
        )

    @app.route("/api/get-song", methods=["GET"])
    def get_song():
        try:
            playlist_id = request.args.get("playlist-id", "")
            date_string = request.args.get("date", "")
            result = selector.resolve(playlist_id, date_string)

            event_log.log_info(
                g.request_id,
                "get-song:200",
                {"event": _request_event(), "userSessionId": g.user_session_id},
            )
            return _json_response(app, result.to_payload())
        except Exception as e:
            event_log.log_error(
                g.request_id,
                "get-song:500",
                {
                    "event": _request_event(),
                    "userSessionId": g.user_session_id,
                    "error": jsonify_error(e),
                },
            )
            alerter.try_send_notification(f"({g.user_session_id})get-song:500:{request.url}")
            raise

    @app.route("/api/search-playlists", methods=["GET"])
    def search_playlists_route():
        try:
            q = request.args.get("q", "")
            offset, limit = normalize_paging(request.args.get("offset"), request.args.get("limit"))

            if not q:
                event_log.log_info(
                    g.request_id,
                    "search-playlists:400",
                    {"event": _request_event(), "userSessionId": g.user_session_id},
                )
                return _json_response(
                    app, {"error": {"status": 400, "message": "No search query"}}, status=400
                )

            results = search_playlists(provider, q, offset, limit)

            event_log.log_info(
                g.request_id,
                "search-playlists:200",
                {"event": _request_event(), "userSessionId": g.user_session_id},
            )
            return _json_response(
                app,
                results.to_payload(),
                headers=get_cache_control_header(
                    public=True, max_age_days=settings.SEARCH_CACHE_MAX_AGE_DAYS
                ),
            )
        except Exception as e:
            event_log.log_error(
                g.request_id,
                "search-playlists:500",
                {
                    "event": _request_event(),
                    "userSessionId": g.user_session_id,
                    "error": jsonify_error(e),
                },
            )
            raise

    return app


app = create_app()
