"""High-level commands bound to keys: add/remove the playing track, remove selection, undo/redo.

Each command resolves its inputs, calls the mutation engine, and reports the
result through the notifier. Errors are caught here and never reach the key
binding layer.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol, Sequence

from mainlist.config import REMOTE_CALL_TIMEOUT_SEC
from mainlist.core.errors import MainlistError
from mainlist.core.locator import PlaylistLocator
from mainlist.core.mutation_engine import MutationEngine
from mainlist.core.notifier import Notifier
from mainlist.core.selection import SelectionStore
from mainlist.core.store import run_blocking
from mainlist.models.operation import OperationKind
from mainlist.models.result import CommandOutcome, CommandResult, HistoryOutcome, HistoryResult

logger = logging.getLogger(__name__)


class Identity(Protocol):
    def current_user_id(self) -> str: ...


class PlayerState(Protocol):
    def current_track_uri(self) -> Optional[str]: ...

    def current_context_playlist_id(self) -> Optional[str]: ...


def _tracks_phrase(count: int) -> str:
    return f"{count} tracks" if count > 1 else "Track"


class Commands:
    def __init__(
        self,
        engine: MutationEngine,
        locator: PlaylistLocator,
        identity: Identity,
        player: PlayerState,
        notifier: Notifier,
        selection: Optional[SelectionStore] = None,
        timeout: Optional[float] = REMOTE_CALL_TIMEOUT_SEC,
    ) -> None:
        self.engine = engine
        self._locator = locator
        self._identity = identity
        self._player = player
        self._notifier = notifier
        self.selection = selection if selection is not None else SelectionStore()
        self._timeout = timeout

    async def _blocking(self, func: Callable, *args):
        try:
            return await run_blocking(func, *args, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise MainlistError(f"Spotify did not answer within {self._timeout}s") from exc

    async def _guarded(self, name: str, body: Callable[[], Awaitable[CommandResult]]) -> CommandResult:
        try:
            return await body()
        except MainlistError as exc:
            logger.warning("%s failed: %s", name, exc)
            return self._report(CommandOutcome.FAILED, f"Error: {exc}", is_error=True)
        except Exception:
            logger.exception("%s failed unexpectedly", name)
            return self._report(CommandOutcome.FAILED, f"Unexpected error in {name}.", is_error=True)

    def _report(self, outcome: CommandOutcome, message: str, *, is_error: bool = False, operation=None) -> CommandResult:
        self._notifier.notify(message, is_error)
        return CommandResult(outcome=outcome, message=message, operation=operation)

    async def _context_playlist_id(self) -> Optional[str]:
        return await self._blocking(self._player.current_context_playlist_id)

    async def resolve_main_playlist(self) -> str:
        owner_id = await self._blocking(self._identity.current_user_id)
        return await self._blocking(self._locator.resolve, owner_id)

    async def add_current_to_main(self) -> CommandResult:
        async def body() -> CommandResult:
            playlist_id = await self.resolve_main_playlist()
            track_uri = await self._blocking(self._player.current_track_uri)
            if not track_uri:
                return self._report(CommandOutcome.NO_ACTIVE_MEMBER, "No track currently playing.", is_error=True)
            operation = await self.engine.add_members(playlist_id, [track_uri])
            return self._report(CommandOutcome.APPLIED, "Track added to playlist.", operation=operation)

        return await self._guarded("add_current_to_main", body)

    async def remove_current_from_context(self) -> CommandResult:
        async def body() -> CommandResult:
            playlist_id = await self._context_playlist_id()
            track_uri = await self._blocking(self._player.current_track_uri)
            if not playlist_id or not track_uri:
                return self._report(
                    CommandOutcome.NO_CONTEXT, "No valid playlist or track context found.", is_error=True
                )
            operation = await self.engine.remove_members(playlist_id, [track_uri])
            return self._report(CommandOutcome.APPLIED, "Track removed from playlist.", operation=operation)

        return await self._guarded("remove_current_from_context", body)

    async def remove_selected(self, track_uris: Optional[Sequence[str]] = None) -> CommandResult:
        async def body() -> CommandResult:
            playlist_id = await self._context_playlist_id()
            if not playlist_id:
                return self._report(
                    CommandOutcome.NO_CONTEXT, "No valid playlist context found for removal.", is_error=True
                )
            uris = list(track_uris) if track_uris is not None else self.selection.selected_tracks()
            if not uris:
                return self._report(CommandOutcome.NO_SELECTION, "No tracks selected.", is_error=True)
            operation = await self.engine.remove_members(playlist_id, uris)
            if track_uris is None:
                self.selection.clear()
            if len(uris) > 1:
                message = f"Removed {len(uris)} tracks from playlist."
            else:
                message = "Track removed from playlist."
            return self._report(CommandOutcome.APPLIED, message, operation=operation)

        return await self._guarded("remove_selected", body)

    async def undo(self) -> CommandResult:
        async def body() -> CommandResult:
            return self._history_report("Undo", await self.engine.undo())

        return await self._guarded("undo", body)

    async def redo(self) -> CommandResult:
        async def body() -> CommandResult:
            return self._history_report("Redo", await self.engine.redo())

        return await self._guarded("redo", body)

    def _history_report(self, label: str, result: HistoryResult) -> CommandResult:
        if result.outcome is HistoryOutcome.NO_OP:
            return self._report(CommandOutcome.NO_OP, f"No actions to {label.lower()}.")
        operation = result.operation
        if result.outcome is HistoryOutcome.DROPPED:
            return self._report(
                CommandOutcome.FAILED,
                f"{label} failed; the action was removed from history. {result.error or ''}".strip(),
                is_error=True,
                operation=operation,
            )
        phrase = _tracks_phrase(len(operation.track_uris))
        # Undo of an add removes; redo of an add adds again
        added = (operation.kind is OperationKind.ADD) == (label == "Redo")
        if added:
            message = f"{label}: {phrase} added to playlist."
        else:
            message = f"{label}: {phrase} removed from playlist."
        return self._report(CommandOutcome.APPLIED, message, operation=operation)

    def registry(self) -> dict:
        """Zero-argument commands by name, for key bindings."""
        return {
            "add_current_to_main": self.add_current_to_main,
            "remove_current_from_context": self.remove_current_from_context,
            "remove_selected": self.remove_selected,
            "undo": self.undo,
            "redo": self.redo,
        }
