"""Configuration: env, Spotify credentials, timeouts, key bindings."""
import os
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of mainlist package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so SPOTIFY_CLIENT_ID etc. are set
load_dotenv(BASE_DIR / ".env")

DATA_DIR = BASE_DIR / "data"
SPOTIFY_TOKEN_CACHE = DATA_DIR / ".spotify-token"

# API
API_HOST = os.getenv("MAINLIST_API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("MAINLIST_API_PORT", "8000"))

# Spotify (OAuth; tokens stored on disk after first connect)
SPOTIFY_CLIENT_ID = os.getenv("SPOTIFY_CLIENT_ID", "")
SPOTIFY_CLIENT_SECRET = os.getenv("SPOTIFY_CLIENT_SECRET", "")
SPOTIFY_REDIRECT_URI = os.getenv("SPOTIFY_REDIRECT_URI", "http://127.0.0.1:8000/api/spotify/callback")
SPOTIFY_SCOPES = (
    "playlist-read-private playlist-modify-private playlist-modify-public "
    "user-read-playback-state user-read-currently-playing"
)
# After OAuth callback, redirect here (e.g. a local settings page)
MAINLIST_WEB_ORIGIN = os.getenv("MAINLIST_WEB_ORIGIN", "")

# MAIN playlist naming: "<prefix> DD/MM/YY"
PLAYLIST_PREFIX = os.getenv("MAINLIST_PLAYLIST_PREFIX", "MAIN")
PLAYLIST_DESCRIPTION = "Auto-generated MAIN playlist by mainlist"
PLAYLIST_PAGE_SIZE = 50

# Web API accepts at most 100 items per add/remove request
MAX_TRACKS_PER_REQUEST = 100

# Remote calls that take longer than this fail the command instead of blocking the engine
REMOTE_CALL_TIMEOUT_SEC = float(os.getenv("MAINLIST_REMOTE_TIMEOUT_SEC", "15"))

# Background token refresh (access tokens live 60 minutes)
TOKEN_REFRESH_INTERVAL_SEC = float(os.getenv("MAINLIST_TOKEN_REFRESH_SEC", str(55 * 60)))

NOTIFICATION_HISTORY_SIZE = int(os.getenv("MAINLIST_NOTIFICATION_HISTORY", "50"))

# Optional override, e.g. "ctrl+1=add_current_to_main,ctrl+z=undo"
KEY_BINDINGS = os.getenv("KEY_BINDINGS", "")


def ensure_data_dir() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)
