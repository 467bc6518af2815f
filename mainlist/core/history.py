"""Undo/redo stacks of committed playlist operations."""
from typing import List, Optional, Tuple

from mainlist.models.operation import Operation


class HistoryStore:
    """Two stacks of committed operations, most recent last.

    Only operations that were confirmed by Spotify are ever stored. A new
    forward operation clears the redo stack. An entry whose undo or redo fails
    is dropped by the caller (popped and not pushed anywhere).
    """

    def __init__(self) -> None:
        self._undoable: List[Operation] = []
        self._redoable: List[Operation] = []

    @property
    def undoable(self) -> Tuple[Operation, ...]:
        return tuple(self._undoable)

    @property
    def redoable(self) -> Tuple[Operation, ...]:
        return tuple(self._redoable)

    def record(self, operation: Operation) -> None:
        """Store a new forward operation; invalidates redo history."""
        self._undoable.append(operation)
        self._redoable.clear()

    def pop_undoable(self) -> Optional[Operation]:
        return self._undoable.pop() if self._undoable else None

    def pop_redoable(self) -> Optional[Operation]:
        return self._redoable.pop() if self._redoable else None

    def push_undone(self, operation: Operation) -> None:
        """Operation was successfully reversed; it can now be redone."""
        self._redoable.append(operation)

    def push_redone(self, operation: Operation) -> None:
        """Operation was successfully re-applied; it can be undone again."""
        self._undoable.append(operation)

    def clear(self) -> None:
        self._undoable.clear()
        self._redoable.clear()

    def to_dict(self) -> dict:
        return {
            "undoable": [op.to_dict() for op in self._undoable],
            "redoable": [op.to_dict() for op in self._redoable],
        }
