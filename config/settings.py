import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).parent.parent

CATALOG_PROVIDER = os.getenv("CATALOG_PROVIDER", "deezer").strip().lower()
CATALOG_TIMEOUT_SEC = max(1.0, float(os.getenv("CATALOG_TIMEOUT_SEC", "10.0") or 10.0))

DEEZER_API_BASE_URL = str(os.getenv("DEEZER_API_BASE_URL", "https://api.deezer.com") or "").strip().rstrip("/")
X_RAPIDAPI_KEY_DEEZER = str(os.getenv("X_RAPIDAPI_KEY_DEEZER", "") or "").strip()
DEEZER_RAPIDAPI_HOST = os.getenv("DEEZER_RAPIDAPI_HOST", "deezerdevs-deezer.p.rapidapi.com")

SPOTIFY_CLIENT_ID = str(os.getenv("SPOTIFY_CLIENT_ID", "") or "").strip()
SPOTIFY_CLIENT_SECRET = str(os.getenv("SPOTIFY_CLIENT_SECRET", "") or "").strip()
SPOTIFY_PAGE_LIMIT = 100

PUSHOVER_TOKEN = str(os.getenv("PUSHOVER_TOKEN", "") or "").strip()
PUSHOVER_USER = str(os.getenv("PUSHOVER_USER", "") or "").strip()

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in str(os.getenv("CORS_ALLOWED_ORIGINS", "*") or "*").split(",")
    if origin.strip()
]

RESULT_CACHE_MAX_ENTRIES = max(0, int(os.getenv("RESULT_CACHE_MAX_ENTRIES", "0") or 0))

SEARCH_DEFAULT_LIMIT = 10
SEARCH_MAX_LIMIT = 100
SEARCH_CACHE_MAX_AGE_DAYS = 1

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 5000))
