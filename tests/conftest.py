import sys
import threading
import time
from datetime import date
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest

# Ensure project root is on sys.path for direct package imports
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mainlist.core.commands import Commands  # noqa: E402
from mainlist.core.errors import RemoteStoreError  # noqa: E402
from mainlist.core.keybindings import KeyBindings  # noqa: E402
from mainlist.core.locator import PlaylistLocator  # noqa: E402
from mainlist.core.mutation_engine import MutationEngine  # noqa: E402
from mainlist.core.selection import SelectionStore  # noqa: E402
from mainlist.models.playlist import PlaylistPage, PlaylistSummary  # noqa: E402

TODAY = date(2024, 3, 5)


class FakePlaylistStore:
    """In-memory PlaylistStore.

    failures maps a method name to a list of outcomes consumed one per call:
    an exception instance is raised, "no_snapshot" returns an empty response.
    """

    def __init__(self, page_size: int = 50) -> None:
        self.playlists: Dict[str, dict] = {}
        self.page_size = page_size
        self.failures: Dict[str, list] = {}
        self.calls: List[tuple] = []
        self.delay = 0.0
        self._snapshot = 0
        self._lock = threading.Lock()

    def add_playlist(self, playlist_id: str, name: str, owner_id: str, tracks=None) -> None:
        self.playlists[playlist_id] = {"name": name, "owner": owner_id, "tracks": list(tracks or [])}

    def tracks(self, playlist_id: str) -> List[str]:
        return list(self.playlists[playlist_id]["tracks"])

    def fail(self, method: str, *outcomes) -> None:
        self.failures.setdefault(method, []).extend(outcomes)

    def _next_failure(self, method: str):
        pending = self.failures.get(method) or []
        if not pending:
            return None
        outcome = pending.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def _snapshot_id(self) -> str:
        self._snapshot += 1
        return f"snap-{self._snapshot}"

    def list_playlists(self, cursor: Optional[str] = None) -> PlaylistPage:
        self.calls.append(("list_playlists", cursor))
        self._next_failure("list_playlists")
        start = int(cursor) if cursor else 0
        ids = list(self.playlists)
        chunk = ids[start:start + self.page_size]
        items = [
            PlaylistSummary(id=pid, name=self.playlists[pid]["name"], owner_id=self.playlists[pid]["owner"])
            for pid in chunk
        ]
        end = start + self.page_size
        return PlaylistPage(items=items, next_cursor=str(end) if end < len(ids) else None)

    def create_playlist(self, owner_id: str, name: str, *, public: bool, description: str) -> dict:
        self.calls.append(("create_playlist", owner_id, name, public, description))
        if self._next_failure("create_playlist") == "no_snapshot":
            return {}
        playlist_id = f"new-{len(self.playlists) + 1}"
        self.add_playlist(playlist_id, name, owner_id)
        return {"id": playlist_id}

    def add_tracks(self, playlist_id: str, track_uris) -> dict:
        self.calls.append(("add_tracks", playlist_id, list(track_uris)))
        if self.delay:
            time.sleep(self.delay)
        if self._next_failure("add_tracks") == "no_snapshot":
            return {}
        with self._lock:
            self.playlists[playlist_id]["tracks"].extend(track_uris)
            return {"snapshot_id": self._snapshot_id()}

    def remove_tracks(self, playlist_id: str, track_uris) -> dict:
        self.calls.append(("remove_tracks", playlist_id, list(track_uris)))
        if self.delay:
            time.sleep(self.delay)
        if self._next_failure("remove_tracks") == "no_snapshot":
            return {}
        with self._lock:
            doomed = set(track_uris)
            tracks = self.playlists[playlist_id]["tracks"]
            self.playlists[playlist_id]["tracks"] = [t for t in tracks if t not in doomed]
            return {"snapshot_id": self._snapshot_id()}


class FakeIdentity:
    def __init__(self, user_id: str = "u1") -> None:
        self.user_id = user_id

    def current_user_id(self) -> str:
        return self.user_id


class FakePlayer:
    def __init__(self, track_uri: Optional[str] = None, context_playlist_id: Optional[str] = None) -> None:
        self.track_uri = track_uri
        self.context_playlist_id = context_playlist_id

    def current_track_uri(self) -> Optional[str]:
        return self.track_uri

    def current_context_playlist_id(self) -> Optional[str]:
        return self.context_playlist_id


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: List[tuple] = []

    def notify(self, message: str, is_error: bool = False) -> None:
        self.messages.append((message, is_error))


def remote_error(status: int = 500) -> RemoteStoreError:
    return RemoteStoreError(f"HTTP {status}", status=status)


@pytest.fixture()
def store() -> FakePlaylistStore:
    return FakePlaylistStore()


@pytest.fixture()
def engine(store) -> MutationEngine:
    return MutationEngine(store, timeout=2.0)


@pytest.fixture()
def player() -> FakePlayer:
    return FakePlayer()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def commands(store, engine, player, notifier) -> Commands:
    locator = PlaylistLocator(store, today=lambda: TODAY)
    return Commands(
        engine=engine,
        locator=locator,
        identity=FakeIdentity("u1"),
        player=player,
        notifier=notifier,
        selection=SelectionStore(),
        timeout=2.0,
    )


@pytest.fixture()
def app_state(commands, notifier):
    """Stand-in for AppState wired to fakes, for route tests."""
    return SimpleNamespace(
        commands=commands,
        engine=commands.engine,
        locator=commands._locator,
        selection=commands.selection,
        notifications=SimpleNamespace(recent=lambda: []),
        keys=KeyBindings(commands.registry()),
        session=None,
    )
