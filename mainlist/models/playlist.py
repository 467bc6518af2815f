"""Playlist listing pages from the remote store."""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class PlaylistSummary:
    """One playlist as seen in the current user's playlist listing."""
    id: str
    name: str
    owner_id: Optional[str]


@dataclass
class PlaylistPage:
    items: List[PlaylistSummary] = field(default_factory=list)
    next_cursor: Optional[str] = None  # opaque; pass back to list_playlists()
