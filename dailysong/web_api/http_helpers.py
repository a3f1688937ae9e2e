from typing import Dict, Iterable, Optional

SECONDS_PER_DAY = 24 * 60 * 60


def get_cors_headers(origin: Optional[str], allowed_origins: Iterable[str]) -> Dict[str, str]:
    """
    CORS response headers for a request coming from ``origin``.

    ``*`` in the allow-list opens the API to every origin; otherwise a listed
    origin is echoed back and unlisted ones get no CORS headers at all.
    """
    allowed = list(allowed_origins)
    headers = {
        "Access-Control-Allow-Methods": "GET, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
    }
    if "*" in allowed:
        headers["Access-Control-Allow-Origin"] = "*"
        return headers
    if origin and origin in allowed:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Access-Control-Allow-Credentials"] = "true"
        headers["Vary"] = "Origin"
        return headers
    return {}


def get_cache_control_header(public: bool = True, max_age_days: float = 0) -> Dict[str, str]:
    directives = ["public" if public else "private"]
    directives.append(f"max-age={int(max_age_days * SECONDS_PER_DAY)}")
    return {"Cache-Control": ", ".join(directives)}
