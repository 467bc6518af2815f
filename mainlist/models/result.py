"""Outcomes reported by undo/redo and by high-level commands."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mainlist.models.operation import Operation


class HistoryOutcome(str, Enum):
    APPLIED = "applied"
    NO_OP = "no_op"  # nothing to undo/redo
    DROPPED = "dropped"  # reverse/replay failed; entry removed from history


@dataclass
class HistoryResult:
    outcome: HistoryOutcome
    operation: Optional[Operation] = None
    error: Optional[str] = None


class CommandOutcome(str, Enum):
    APPLIED = "applied"
    NO_OP = "no_op"
    NO_ACTIVE_MEMBER = "no_active_member"
    NO_CONTEXT = "no_context"
    NO_SELECTION = "no_selection"
    FAILED = "failed"


@dataclass
class CommandResult:
    """What a command did and the message shown to the user."""
    outcome: CommandOutcome
    message: str
    operation: Optional[Operation] = None

    @property
    def ok(self) -> bool:
        return self.outcome is CommandOutcome.APPLIED

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "outcome": self.outcome.value,
            "message": self.message,
            "operation": self.operation.to_dict() if self.operation else None,
        }
