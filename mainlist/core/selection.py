"""Currently selected tracks, as reported by whatever UI knows the selection."""
import re
import threading
from typing import Iterable, List, Optional

_TRACK_URI_REGEX = re.compile(r"^spotify:track:([a-zA-Z0-9]+)$")
# Parse Spotify web/desktop link to URI, e.g. https://open.spotify.com/track/<id>?si=...
_TRACK_URL_REGEX = re.compile(
    r"^https?://(?:open\.)?spotify\.com/(?:intl-[a-z]+/)?track/([a-zA-Z0-9]+)(?:[?#/]|$)",
    re.IGNORECASE,
)


def parse_track_reference(ref: str) -> Optional[str]:
    """Return spotify:track:<id> for a track URI or open.spotify.com link, else None."""
    value = (ref or "").strip()
    if not value:
        return None
    match = _TRACK_URI_REGEX.match(value) or _TRACK_URL_REGEX.match(value)
    if not match:
        return None
    return f"spotify:track:{match.group(1)}"


def parse_track_references(refs: Iterable[str]) -> List[str]:
    """Parse refs in order, dropping duplicates. Raises ValueError on the first invalid ref."""
    uris: List[str] = []
    for ref in refs:
        uri = parse_track_reference(ref)
        if uri is None:
            raise ValueError(f"Not a Spotify track URI or link: {ref!r}")
        if uri not in uris:
            uris.append(uri)
    return uris


class SelectionStore:
    """Ordered, de-duplicated list of selected track URIs."""

    def __init__(self) -> None:
        self._uris: List[str] = []
        self._lock = threading.Lock()

    def selected_tracks(self) -> List[str]:
        with self._lock:
            return list(self._uris)

    def set(self, refs: Iterable[str]) -> List[str]:
        uris = parse_track_references(refs)
        with self._lock:
            self._uris = uris
        return list(uris)

    def clear(self) -> None:
        with self._lock:
            self._uris = []
