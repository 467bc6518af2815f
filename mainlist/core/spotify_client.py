"""Spotify Web API adapters via Spotipy; uses cached OAuth token."""
import logging
from typing import Optional, Sequence

import requests
from spotipy import Spotify
from spotipy.cache_handler import CacheFileHandler
from spotipy.exceptions import SpotifyException
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from mainlist.config import (
    PLAYLIST_PAGE_SIZE,
    SPOTIFY_CLIENT_ID,
    SPOTIFY_CLIENT_SECRET,
    SPOTIFY_REDIRECT_URI,
    SPOTIFY_SCOPES,
    SPOTIFY_TOKEN_CACHE,
    ensure_data_dir,
)
from mainlist.core.errors import AuthError, NotLinkedError, RemoteStoreError
from mainlist.models.playlist import PlaylistPage, PlaylistSummary

logger = logging.getLogger(__name__)


class SpotifySession:
    """OAuth state for one local user: token cache, refresh, and the Spotipy client."""

    def __init__(
        self,
        client_id: str = SPOTIFY_CLIENT_ID,
        client_secret: str = SPOTIFY_CLIENT_SECRET,
        redirect_uri: str = SPOTIFY_REDIRECT_URI,
        scope: str = SPOTIFY_SCOPES,
        cache_path=SPOTIFY_TOKEN_CACHE,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._scope = scope
        self._cache_path = cache_path
        self._auth: Optional[SpotifyOAuth] = None

    @property
    def configured(self) -> bool:
        return bool(self._client_id and self._client_secret)

    def _auth_manager(self) -> SpotifyOAuth:
        if not self.configured:
            raise NotLinkedError("SPOTIFY_CLIENT_ID / SPOTIFY_CLIENT_SECRET not set")
        if self._auth is None:
            ensure_data_dir()
            self._auth = SpotifyOAuth(
                client_id=self._client_id,
                client_secret=self._client_secret,
                redirect_uri=self._redirect_uri,
                scope=self._scope,
                cache_handler=CacheFileHandler(cache_path=str(self._cache_path)),
                open_browser=False,
            )
        return self._auth

    def auth_url(self) -> str:
        return self._auth_manager().get_authorize_url()

    def is_linked(self) -> bool:
        if not self.configured:
            return False
        auth = self._auth_manager()
        try:
            return auth.validate_token(auth.cache_handler.get_cached_token()) is not None
        except SpotifyOauthError:
            return False

    def client(self) -> Spotify:
        """Return an authenticated Spotipy client; raise NotLinkedError if not logged in."""
        auth = self._auth_manager()
        try:
            token_info = auth.validate_token(auth.cache_handler.get_cached_token())
        except SpotifyOauthError as exc:
            raise NotLinkedError(f"Spotify token is no longer valid: {exc}") from exc
        if token_info is None:
            raise NotLinkedError("Spotify not linked. Connect your account first.")
        return Spotify(auth_manager=auth, requests_timeout=10)

    def refresh(self) -> dict:
        """Force an access token refresh using the cached refresh token."""
        auth = self._auth_manager()
        token_info = auth.cache_handler.get_cached_token()
        if not token_info or not token_info.get("refresh_token"):
            raise NotLinkedError("No refresh token cached. Please connect Spotify again.")
        try:
            refreshed = auth.refresh_access_token(token_info["refresh_token"])
        except (SpotifyOauthError, requests.RequestException) as exc:
            raise AuthError(f"Error refreshing access token: {exc}") from exc
        if not refreshed or not refreshed.get("access_token"):
            raise AuthError("Failed to refresh access token.")
        logger.info("Access token refreshed")
        return refreshed

    def link(self, code: Optional[str] = None, redirect_url: Optional[str] = None) -> None:
        """Exchange an OAuth code, given directly or inside the redirect URL, and cache the tokens.

        Raises ValueError when no code can be found, AuthError when Spotify
        rejects it, NotLinkedError when the client is not configured.
        """
        if not code and redirect_url:
            try:
                _, code = SpotifyOAuth.parse_auth_response_url(redirect_url.strip())
            except SpotifyOauthError as exc:
                raise AuthError(f"Spotify denied the login: {exc}") from exc
        code = (code or "").strip()
        if not code:
            raise ValueError("No authorization code found")
        auth = self._auth_manager()
        try:
            auth.get_access_token(code=code, check_cache=False)
        except (SpotifyOauthError, requests.RequestException) as exc:
            raise AuthError(f"Spotify code exchange failed: {exc}") from exc
        logger.info("Spotify account linked")

    def logout(self) -> None:
        """Clear the token cache so the user is logged out."""
        try:
            if self._cache_path.exists():
                self._cache_path.unlink()
        except OSError as exc:
            logger.warning("Could not remove token cache %s: %s", self._cache_path, exc)


def _translate(description: str, exc: Exception) -> RemoteStoreError:
    if isinstance(exc, SpotifyException):
        return RemoteStoreError(f"{description}: {exc.http_status} {exc.msg}", status=exc.http_status)
    return RemoteStoreError(f"{description}: {exc}")


def playlist_id_from_uri(uri: Optional[str]) -> Optional[str]:
    """Return "123" for "spotify:playlist:123" (also user-scoped URIs), else None."""
    if not uri:
        return None
    parts = uri.split(":")
    if len(parts) < 3 or parts[0] != "spotify" or parts[-2] != "playlist":
        return None
    return parts[-1] or None


class SpotifyPlaylistStore:
    """PlaylistStore backed by the Web API playlist endpoints."""

    def __init__(self, session: SpotifySession, page_size: int = PLAYLIST_PAGE_SIZE) -> None:
        self._session = session
        self._page_size = page_size

    def list_playlists(self, cursor: Optional[str] = None) -> PlaylistPage:
        sp = self._session.client()
        try:
            if cursor:
                # cursor is the "next" URL of the previous page
                response = sp.next({"next": cursor})
            else:
                response = sp.current_user_playlists(limit=self._page_size)
        except (SpotifyException, requests.RequestException) as exc:
            raise _translate("List playlists", exc) from exc
        response = response or {}
        items = []
        for playlist in response.get("items") or []:
            if not playlist or not playlist.get("id"):
                continue
            owner = playlist.get("owner") or {}
            items.append(
                PlaylistSummary(
                    id=playlist["id"],
                    name=playlist.get("name") or "",
                    owner_id=owner.get("id"),
                )
            )
        return PlaylistPage(items=items, next_cursor=response.get("next"))

    def create_playlist(self, owner_id: str, name: str, *, public: bool, description: str) -> dict:
        sp = self._session.client()
        try:
            return sp.user_playlist_create(
                owner_id,
                name,
                public=public,
                description=description,
            ) or {}
        except (SpotifyException, requests.RequestException) as exc:
            raise _translate("Create playlist", exc) from exc

    def add_tracks(self, playlist_id: str, track_uris: Sequence[str]) -> dict:
        sp = self._session.client()
        try:
            return sp.playlist_add_items(playlist_id, list(track_uris)) or {}
        except (SpotifyException, requests.RequestException) as exc:
            raise _translate("Add tracks", exc) from exc

    def remove_tracks(self, playlist_id: str, track_uris: Sequence[str]) -> dict:
        sp = self._session.client()
        try:
            return sp.playlist_remove_all_occurrences_of_items(playlist_id, list(track_uris)) or {}
        except (SpotifyException, requests.RequestException) as exc:
            raise _translate("Remove tracks", exc) from exc


class SpotifyIdentity:
    def __init__(self, session: SpotifySession) -> None:
        self._session = session

    def current_user_id(self) -> str:
        sp = self._session.client()
        try:
            me = sp.me() or {}
        except (SpotifyException, requests.RequestException) as exc:
            raise _translate("Fetch current user", exc) from exc
        user_id = me.get("id")
        if not user_id:
            raise RemoteStoreError("Fetch current user: no id in response")
        return user_id


class SpotifyPlayerState:
    """Playing track and playback context from current_playback()."""

    def __init__(self, session: SpotifySession) -> None:
        self._session = session

    def _playback(self) -> dict:
        sp = self._session.client()
        try:
            return sp.current_playback() or {}
        except (SpotifyException, requests.RequestException) as exc:
            raise _translate("Fetch playback state", exc) from exc

    def current_track_uri(self) -> Optional[str]:
        item = self._playback().get("item") or {}
        return item.get("uri") or None

    def current_context_playlist_id(self) -> Optional[str]:
        context = self._playback().get("context") or {}
        return playlist_id_from_uri(context.get("uri"))
