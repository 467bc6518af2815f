"""Applies add/remove mutations to playlists and keeps the undo/redo history."""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from mainlist.config import MAX_TRACKS_PER_REQUEST, REMOTE_CALL_TIMEOUT_SEC
from mainlist.core.errors import MainlistError, MutationError
from mainlist.core.history import HistoryStore
from mainlist.core.store import PlaylistStore, run_blocking
from mainlist.models.operation import MutationIntent, Operation, OperationKind, invert, replay
from mainlist.models.result import HistoryOutcome, HistoryResult

logger = logging.getLogger(__name__)


class MutationEngine:
    """Commits playlist mutations and records them for undo/redo.

    Every method that touches the history runs under one asyncio.Lock, so two
    commands never interleave their pops and pushes. Each remote call is
    bounded by timeout; on expiry the command fails with MutationError and the
    lock is released (the request itself is not cancelled).
    """

    def __init__(
        self,
        store: PlaylistStore,
        history: Optional[HistoryStore] = None,
        timeout: Optional[float] = REMOTE_CALL_TIMEOUT_SEC,
    ) -> None:
        self._store = store
        self.history = history if history is not None else HistoryStore()
        self._timeout = timeout
        self._lock = asyncio.Lock()

    @property
    def can_undo(self) -> bool:
        return bool(self.history.undoable)

    @property
    def can_redo(self) -> bool:
        return bool(self.history.redoable)

    async def add_members(self, playlist_id: str, track_uris: Sequence[str]) -> Operation:
        return await self._commit(MutationIntent(OperationKind.ADD, playlist_id, tuple(track_uris)))

    async def remove_members(self, playlist_id: str, track_uris: Sequence[str]) -> Operation:
        return await self._commit(MutationIntent(OperationKind.REMOVE, playlist_id, tuple(track_uris)))

    async def undo(self) -> HistoryResult:
        async with self._lock:
            operation = self.history.pop_undoable()
            if operation is None:
                return HistoryResult(HistoryOutcome.NO_OP)
            try:
                await self._apply(invert(operation))
            except MutationError as exc:
                logger.warning("Undo of %s failed, dropping it from history: %s", _describe(operation), exc)
                return HistoryResult(HistoryOutcome.DROPPED, operation, str(exc))
            self.history.push_undone(operation)
            logger.info("Undo: reversed %s", _describe(operation))
            return HistoryResult(HistoryOutcome.APPLIED, operation)

    async def redo(self) -> HistoryResult:
        async with self._lock:
            operation = self.history.pop_redoable()
            if operation is None:
                return HistoryResult(HistoryOutcome.NO_OP)
            try:
                await self._apply(replay(operation))
            except MutationError as exc:
                logger.warning("Redo of %s failed, dropping it from history: %s", _describe(operation), exc)
                return HistoryResult(HistoryOutcome.DROPPED, operation, str(exc))
            self.history.push_redone(operation)
            logger.info("Redo: re-applied %s", _describe(operation))
            return HistoryResult(HistoryOutcome.APPLIED, operation)

    async def clear_history(self) -> None:
        """Forget every recorded operation, after any in-flight undo/redo finishes."""
        async with self._lock:
            self.history.clear()
        logger.info("History cleared")

    async def _commit(self, intent: MutationIntent) -> Operation:
        async with self._lock:
            snapshot_id = await self._apply(intent)
            operation = Operation(
                kind=intent.kind,
                playlist_id=intent.playlist_id,
                track_uris=intent.track_uris,
                snapshot_id=snapshot_id,
                committed_at=datetime.now(timezone.utc),
            )
            self.history.record(operation)
            logger.info("Committed %s (snapshot %s)", _describe(operation), snapshot_id)
            return operation

    async def _apply(self, intent: MutationIntent) -> str:
        """Send intent to the store; return the confirming snapshot id."""
        if not intent.playlist_id:
            raise MutationError("No playlist id given")
        if not intent.track_uris:
            raise MutationError("No tracks given")
        if len(intent.track_uris) > MAX_TRACKS_PER_REQUEST:
            raise MutationError(
                f"Too many tracks in one request ({len(intent.track_uris)} > {MAX_TRACKS_PER_REQUEST})"
            )

        if intent.kind is OperationKind.ADD:
            call = self._store.add_tracks
        else:
            call = self._store.remove_tracks
        uris = list(intent.track_uris)
        try:
            response = await run_blocking(call, intent.playlist_id, uris, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise MutationError(
                f"Timed out after {self._timeout}s while trying to {intent.kind.value} tracks"
            ) from exc
        except MainlistError as exc:
            raise MutationError(f"Failed to {intent.kind.value} tracks: {exc}") from exc

        snapshot_id = (response or {}).get("snapshot_id") if isinstance(response, dict) else None
        if not snapshot_id:
            raise MutationError(f"Spotify did not confirm the {intent.kind.value} (no snapshot_id)")
        return snapshot_id


def _describe(intent: MutationIntent) -> str:
    return f"{intent.kind.value} of {len(intent.track_uris)} track(s) on playlist {intent.playlist_id}"
