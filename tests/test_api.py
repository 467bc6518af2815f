from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from mainlist.api.app import app
from mainlist.api.state import get_state

A = "spotify:track:a"


@pytest.fixture()
def client(app_state):
    app.dependency_overrides[get_state] = lambda: app_state
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_add_current_and_history(client, store, player):
    store.add_playlist("main-1", "MAIN 05/03/24", "u1")
    player.track_uri = A

    resp = client.post("/api/commands/add-current")
    assert resp.status_code == 200
    data = resp.json()
    assert data["ok"] is True
    assert data["outcome"] == "applied"
    assert data["operation"]["track_uris"] == [A]

    history = client.get("/api/commands/history").json()
    assert len(history["undoable"]) == 1
    assert history["redoable"] == []


def test_undo_with_nothing_to_undo(client):
    resp = client.post("/api/commands/undo")
    assert resp.status_code == 200
    assert resp.json()["outcome"] == "no_op"


def test_remove_selected_with_body(client, store, player):
    store.add_playlist("ctx", "Road trip", "u1", tracks=[A, "spotify:track:b"])
    player.context_playlist_id = "ctx"

    resp = client.post("/api/commands/remove-selected", json={"tracks": ["https://open.spotify.com/track/a"]})

    assert resp.status_code == 200
    assert resp.json()["ok"] is True
    assert store.tracks("ctx") == ["spotify:track:b"]


def test_remove_selected_rejects_bad_reference(client, player):
    player.context_playlist_id = "ctx"
    resp = client.post("/api/commands/remove-selected", json={"tracks": ["nope"]})
    assert resp.status_code == 400


def test_remove_selected_without_context(client):
    resp = client.post("/api/commands/remove-selected")
    assert resp.status_code == 200
    assert resp.json()["outcome"] == "no_context"


def test_selection_roundtrip(client):
    resp = client.put("/api/selection", json={"tracks": [A, "https://open.spotify.com/track/b"]})
    assert resp.status_code == 200
    assert resp.json() == {"tracks": [A, "spotify:track:b"]}
    assert client.get("/api/selection").json() == {"tracks": [A, "spotify:track:b"]}

    assert client.delete("/api/selection").status_code == 204
    assert client.get("/api/selection").json() == {"tracks": []}


def test_key_dispatch(client, store, player):
    store.add_playlist("main-1", "MAIN 05/03/24", "u1")
    player.track_uri = A

    assert client.post("/api/keys/ctrl+1").json()["ok"] is True
    assert client.post("/api/keys/ctrl+z").json()["message"] == "Undo: Track removed from playlist."
    assert client.post("/api/keys/ctrl+shift+z").json()["message"] == "Redo: Track added to playlist."
    assert store.tracks("main-1") == [A]


def test_key_dispatch_unknown_combo(client):
    assert client.post("/api/keys/ctrl+9").status_code == 404


def test_list_bindings(client):
    bindings = client.get("/api/keys").json()
    assert bindings["ctrl+1"] == "add_current_to_main"
    assert bindings["ctrl+y"] == "redo"


def test_main_playlist_lookup(client, store):
    store.add_playlist("main-1", "MAIN 01/03/24", "u1")

    resp = client.get("/api/playlists/main")

    assert resp.status_code == 200
    assert resp.json() == {"playlist_id": "main-1", "expected_name": "MAIN 05/03/24"}


def test_logout_clears_token_and_history(client, app_state, store, player):
    store.add_playlist("main-1", "MAIN 05/03/24", "u1")
    player.track_uri = A
    app_state.session = MagicMock()
    client.post("/api/commands/add-current")
    client.post("/api/commands/undo")

    resp = client.post("/api/spotify/logout")

    assert resp.status_code == 200
    app_state.session.logout.assert_called_once_with()
    assert client.get("/api/commands/history").json() == {"undoable": [], "redoable": []}


def test_complete_login_passes_code_to_session(client, app_state):
    app_state.session = MagicMock()

    resp = client.post("/api/spotify/complete-login", json={"redirect_url": "http://x/callback?code=abc"})

    assert resp.status_code == 200
    app_state.session.link.assert_called_once_with(code=None, redirect_url="http://x/callback?code=abc")


def test_complete_login_without_code(client, app_state):
    app_state.session = MagicMock()
    app_state.session.link.side_effect = ValueError("No authorization code found")

    resp = client.post("/api/spotify/complete-login", json={})

    assert resp.status_code == 400
