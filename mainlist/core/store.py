"""Remote playlist store interface, 401-retry middleware, and the blocking-call runner."""
import asyncio
import logging
from typing import Any, Callable, Optional, Protocol, Sequence, TypeVar

from mainlist.core.errors import AuthError, NotLinkedError, RemoteStoreError
from mainlist.models.playlist import PlaylistPage

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class PlaylistStore(Protocol):
    """Remote playlist operations the core relies on.

    add_tracks/remove_tracks return the raw response; a response without a
    "snapshot_id" means the mutation was not confirmed.
    """

    def list_playlists(self, cursor: Optional[str] = None) -> PlaylistPage: ...

    def create_playlist(self, owner_id: str, name: str, *, public: bool, description: str) -> dict: ...

    def add_tracks(self, playlist_id: str, track_uris: Sequence[str]) -> dict: ...

    def remove_tracks(self, playlist_id: str, track_uris: Sequence[str]) -> dict: ...


class ReauthenticatingStore:
    """Wraps a PlaylistStore: on HTTP 401, refresh the token once and retry once."""

    def __init__(self, inner: PlaylistStore, refresh: Callable[[], Any]) -> None:
        self._inner = inner
        self._refresh = refresh

    def _call(self, description: str, func: Callable[[], _T]) -> _T:
        try:
            return func()
        except RemoteStoreError as exc:
            if exc.status != 401:
                raise
            logger.warning("%s: got 401; refreshing token and retrying", description)
        try:
            self._refresh()
        except (AuthError, NotLinkedError) as exc:
            raise RemoteStoreError(f"{description}: token refresh failed: {exc}", status=401) from exc
        return func()

    def list_playlists(self, cursor: Optional[str] = None) -> PlaylistPage:
        return self._call("List playlists", lambda: self._inner.list_playlists(cursor))

    def create_playlist(self, owner_id: str, name: str, *, public: bool, description: str) -> dict:
        return self._call(
            "Create playlist",
            lambda: self._inner.create_playlist(owner_id, name, public=public, description=description),
        )

    def add_tracks(self, playlist_id: str, track_uris: Sequence[str]) -> dict:
        return self._call("Add tracks", lambda: self._inner.add_tracks(playlist_id, track_uris))

    def remove_tracks(self, playlist_id: str, track_uris: Sequence[str]) -> dict:
        return self._call("Remove tracks", lambda: self._inner.remove_tracks(playlist_id, track_uris))


async def run_blocking(func: Callable[..., _T], *args: Any, timeout: Optional[float] = None) -> _T:
    """Run a blocking call (spotipy) in a worker thread.

    Raises asyncio.TimeoutError when timeout expires; the worker thread is not
    cancelled and may still complete in the background.
    """
    return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=timeout)
