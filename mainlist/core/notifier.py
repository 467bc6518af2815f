"""User-facing notifications: logged and kept in a short in-memory feed."""
import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Protocol

from mainlist.config import NOTIFICATION_HISTORY_SIZE

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, message: str, is_error: bool = False) -> None: ...


@dataclass
class Notification:
    message: str
    is_error: bool
    created_at: str


class NotificationFeed:
    """Notifier that logs each message and remembers the most recent ones."""

    def __init__(self, maxlen: int = NOTIFICATION_HISTORY_SIZE) -> None:
        self._items: deque = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def notify(self, message: str, is_error: bool = False) -> None:
        if is_error:
            logger.error("[Error] %s", message)
        else:
            logger.info("[Info] %s", message)
        item = Notification(
            message=message,
            is_error=is_error,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            self._items.append(item)

    def recent(self) -> List[Notification]:
        """Newest first."""
        with self._lock:
            return list(reversed(self._items))

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
