"""Data models for operations, playlists, and command results."""
from mainlist.models.operation import MutationIntent, Operation, OperationKind, invert, replay
from mainlist.models.playlist import PlaylistPage, PlaylistSummary
from mainlist.models.result import CommandOutcome, CommandResult, HistoryOutcome, HistoryResult

__all__ = [
    "MutationIntent",
    "Operation",
    "OperationKind",
    "invert",
    "replay",
    "PlaylistPage",
    "PlaylistSummary",
    "CommandOutcome",
    "CommandResult",
    "HistoryOutcome",
    "HistoryResult",
]
