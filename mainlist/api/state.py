"""Shared application state (injected into routes)."""
from mainlist.core.commands import Commands
from mainlist.core.keybindings import KeyBindings
from mainlist.core.locator import PlaylistLocator
from mainlist.core.mutation_engine import MutationEngine
from mainlist.core.notifier import NotificationFeed
from mainlist.core.selection import SelectionStore
from mainlist.core.spotify_client import (
    SpotifyIdentity,
    SpotifyPlayerState,
    SpotifyPlaylistStore,
    SpotifySession,
)
from mainlist.core.store import ReauthenticatingStore


class AppState:
    def __init__(self, session: SpotifySession | None = None) -> None:
        self.session = session if session is not None else SpotifySession()
        store = ReauthenticatingStore(SpotifyPlaylistStore(self.session), self.session.refresh)
        self.notifications = NotificationFeed()
        self.selection = SelectionStore()
        self.locator = PlaylistLocator(store)
        self.engine = MutationEngine(store)
        self.commands = Commands(
            engine=self.engine,
            locator=self.locator,
            identity=SpotifyIdentity(self.session),
            player=SpotifyPlayerState(self.session),
            notifier=self.notifications,
            selection=self.selection,
        )
        self.keys = KeyBindings.from_config(self.commands.registry())


_state = AppState()


def get_state() -> AppState:
    return _state
