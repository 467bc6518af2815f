"""Committed playlist mutations and their inverses."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Tuple


class OperationKind(str, Enum):
    ADD = "add"
    REMOVE = "remove"

    @property
    def opposite(self) -> "OperationKind":
        return OperationKind.REMOVE if self is OperationKind.ADD else OperationKind.ADD


@dataclass(frozen=True)
class MutationIntent:
    """A mutation to apply: kind, target playlist and ordered track URIs."""
    kind: OperationKind
    playlist_id: str
    track_uris: Tuple[str, ...]


@dataclass(frozen=True)
class Operation(MutationIntent):
    """A mutation the remote playlist confirmed with a new snapshot."""
    snapshot_id: str = ""
    committed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "playlist_id": self.playlist_id,
            "track_uris": list(self.track_uris),
            "snapshot_id": self.snapshot_id,
            "committed_at": self.committed_at.isoformat(),
        }


def invert(operation: Operation) -> MutationIntent:
    """Return the mutation that reverses operation (same playlist, same tracks)."""
    return MutationIntent(
        kind=operation.kind.opposite,
        playlist_id=operation.playlist_id,
        track_uris=operation.track_uris,
    )


def replay(operation: Operation) -> MutationIntent:
    """Return the mutation that applies operation again."""
    return MutationIntent(
        kind=operation.kind,
        playlist_id=operation.playlist_id,
        track_uris=operation.track_uris,
    )
