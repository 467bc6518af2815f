"""Find (or create) the user's MAIN playlist named "MAIN DD/MM/YY"."""
import logging
import re
from datetime import date
from typing import Callable, Optional

from mainlist.config import PLAYLIST_DESCRIPTION, PLAYLIST_PREFIX
from mainlist.core.errors import CreationError, LocatorError, RemoteStoreError
from mainlist.core.store import PlaylistStore
from mainlist.models.playlist import PlaylistSummary

logger = logging.getLogger(__name__)


def format_main_name(day: date, prefix: str = PLAYLIST_PREFIX) -> str:
    """Return e.g. "MAIN 05/03/24" for 5 March 2024."""
    return f"{prefix} {day:%d/%m/%y}"


def main_name_pattern(prefix: str = PLAYLIST_PREFIX) -> "re.Pattern[str]":
    # Structural check only: "MAIN 99/99/99" matches too
    return re.compile(rf"^{re.escape(prefix)} [0-9]{{2}}/[0-9]{{2}}/[0-9]{{2}}\Z")


MAIN_NAME_PATTERN = main_name_pattern()


class PlaylistLocator:
    """Resolves the owner's MAIN playlist id, creating today's one if none exists.

    Nothing is cached: every resolve() walks the playlist listing again.
    """

    def __init__(
        self,
        store: PlaylistStore,
        today: Callable[[], date] = date.today,
        prefix: str = PLAYLIST_PREFIX,
        description: str = PLAYLIST_DESCRIPTION,
    ) -> None:
        self._store = store
        self._today = today
        self._prefix = prefix
        self._pattern = main_name_pattern(prefix)
        self._description = description

    def todays_name(self) -> str:
        return format_main_name(self._today(), self._prefix)

    def is_main_playlist(self, playlist: PlaylistSummary, owner_id: str) -> bool:
        return playlist.owner_id == owner_id and bool(self._pattern.match(playlist.name or ""))

    def find(self, owner_id: str) -> Optional[str]:
        """Return the id of the first matching playlist in listing order, or None."""
        cursor: Optional[str] = None
        page_no = 0
        while True:
            page_no += 1
            try:
                page = self._store.list_playlists(cursor)
            except RemoteStoreError as exc:
                raise LocatorError(f"Failed to list playlists: {exc}") from exc
            for playlist in page.items:
                if self.is_main_playlist(playlist, owner_id):
                    logger.debug("Locator: matched %r (%s) on page %d", playlist.name, playlist.id, page_no)
                    return playlist.id
            if not page.next_cursor:
                return None
            cursor = page.next_cursor

    def resolve(self, owner_id: str) -> str:
        playlist_id = self.find(owner_id)
        if playlist_id is not None:
            return playlist_id
        logger.info("Locator: no playlist matching %r for %s, creating one", self._pattern.pattern, owner_id)
        return self.create(owner_id)

    def create(self, owner_id: str) -> str:
        name = self.todays_name()
        try:
            result = self._store.create_playlist(
                owner_id,
                name,
                public=False,
                description=self._description,
            )
        except RemoteStoreError as exc:
            raise CreationError(f"Failed to create {name} playlist: {exc}") from exc
        playlist_id = (result or {}).get("id")
        if not playlist_id:
            raise CreationError(f"Failed to create {name} playlist: no id in response")
        logger.info("Locator: created %s (%s)", name, playlist_id)
        return playlist_id
