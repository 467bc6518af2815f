"""FastAPI app, CORS, and route registration."""
import logging
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from mainlist.api.state import AppState, get_state
from mainlist.config import TOKEN_REFRESH_INTERVAL_SEC, ensure_data_dir
from mainlist.core.errors import AuthError, NotLinkedError

# Import routes after state to avoid circular imports
from mainlist.api.routes import commands, keys, playlists, selection, spotify

__all__ = ["app", "AppState", "get_state"]

logger = logging.getLogger(__name__)

_state = get_state()


def _token_refresh_loop(stop_event: threading.Event) -> None:
    """Background loop: refresh the Spotify access token before it expires."""
    while not stop_event.wait(timeout=TOKEN_REFRESH_INTERVAL_SEC):
        try:
            _state.session.refresh()
        except NotLinkedError:
            logger.debug("Token refresh: Spotify not linked, skipping")
        except AuthError as e:
            logger.warning("Token refresh: %s", e)
            _state.notifications.notify("Error refreshing access token. Please re-login.", True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_data_dir()

    _refresh_stop = threading.Event()
    _refresh_thread = threading.Thread(
        target=_token_refresh_loop,
        args=(_refresh_stop,),
        daemon=True,
    )
    _refresh_thread.start()
    logger.info("Token refresh thread started (interval %.0fs)", TOKEN_REFRESH_INTERVAL_SEC)

    yield

    _refresh_stop.set()
    _refresh_thread.join(timeout=5.0)


app = FastAPI(
    title="mainlist API",
    description="Local REST API for keyboard-driven Spotify playlist edits with undo/redo",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(commands.router, prefix="/api/commands", tags=["commands"])
app.include_router(keys.router, prefix="/api/keys", tags=["keys"])
app.include_router(playlists.router, prefix="/api/playlists", tags=["playlists"])
app.include_router(selection.router, prefix="/api", tags=["selection"])
app.include_router(spotify.router, prefix="/api/spotify", tags=["spotify"])
