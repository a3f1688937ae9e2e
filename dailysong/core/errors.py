from typing import Optional


class DailySongError(Exception):
    status = 500

    def __init__(self, message: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class ZeroTracksError(DailySongError):
    """Raised when a playlist has no usable tracks to pick an answer from."""

    def __init__(self, playlist_id: str):
        super().__init__(f"Playlist {playlist_id!r} has no usable tracks")
        self.playlist_id = playlist_id


class CatalogError(DailySongError):
    """Base class for failures reported by a catalog provider."""


class UpstreamUnavailable(CatalogError):
    status = 502


class SearchNotSupported(UpstreamUnavailable):
    status = 501


class NotFound(CatalogError):
    status = 404


# Never raised: unparseable dates fall back to the current time.
class InvalidDateInput(DailySongError):
    status = 400
