import pytest

from mainlist.core.notifier import NotificationFeed
from mainlist.core.selection import SelectionStore, parse_track_reference


@pytest.mark.parametrize(
    "ref,expected",
    [
        ("spotify:track:4uLU6hMCjMI75M1A2tKUQC", "spotify:track:4uLU6hMCjMI75M1A2tKUQC"),
        ("https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC", "spotify:track:4uLU6hMCjMI75M1A2tKUQC"),
        ("https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC?si=abc", "spotify:track:4uLU6hMCjMI75M1A2tKUQC"),
        ("https://open.spotify.com/intl-de/track/abc123", "spotify:track:abc123"),
        ("  spotify:track:abc  ", "spotify:track:abc"),
        ("spotify:album:abc", None),
        ("https://open.spotify.com/playlist/abc", None),
        ("", None),
    ],
)
def test_parse_track_reference(ref, expected):
    assert parse_track_reference(ref) == expected


def test_selection_store_dedupes_in_order():
    selection = SelectionStore()
    tracks = selection.set(["spotify:track:b", "spotify:track:a", "https://open.spotify.com/track/b"])

    assert tracks == ["spotify:track:b", "spotify:track:a"]
    assert selection.selected_tracks() == tracks


def test_selection_store_rejects_invalid_and_keeps_previous():
    selection = SelectionStore()
    selection.set(["spotify:track:a"])

    with pytest.raises(ValueError):
        selection.set(["spotify:track:b", "not-a-track"])

    assert selection.selected_tracks() == ["spotify:track:a"]
    selection.clear()
    assert selection.selected_tracks() == []


def test_notification_feed_keeps_recent_newest_first():
    feed = NotificationFeed(maxlen=2)
    feed.notify("one")
    feed.notify("two", True)
    feed.notify("three")

    recent = feed.recent()
    assert [n.message for n in recent] == ["three", "two"]
    assert recent[1].is_error is True
