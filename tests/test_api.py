from __future__ import annotations

import logging

from sqlalchemy.exc import OperationalError

from drawity.canvas import Canvas
from drawity.server.store import GameStore


def _create(client) -> dict:
    resp = client.post("/games")
    assert resp.status_code == 200
    return resp.json()


def test_healthz(client):
    assert client.get("/healthz").json() == {"ok": True}


def test_create_game_shape(client):
    body = _create(client)

    assert set(body) == {"gameId", "player1Id", "player2Id"}
    assert body["player1Id"] != body["player2Id"]


def test_read_after_create(client):
    g = _create(client)

    body = client.get(f"/games/{g['gameId']}").json()
    assert body == {
        "gameId": g["gameId"],
        "player1Id": g["player1Id"],
        "player2Id": g["player2Id"],
        "currentPlayerId": g["player1Id"],
        "canvasData": None,
        "status": "waiting",
    }


def test_read_logs_polls_when_message_debugging_enabled(client, settings, caplog):
    settings.debug_log_msgs = True
    g = _create(client)

    with caplog.at_level(logging.DEBUG, logger="drawity.server.app"):
        assert client.get(f"/games/{g['gameId']}").status_code == 200
    assert f"poll game={g['gameId']}" in caplog.text


def test_read_unknown_game(client):
    resp = client.get("/games/does-not-exist")

    assert resp.status_code == 404
    assert resp.json() == {"error": "Game not found"}


def test_turn_exchange_example(client):
    g = _create(client)
    gid, a, b = g["gameId"], g["player1Id"], g["player2Id"]
    assert client.get(f"/games/{gid}").json()["currentPlayerId"] == a

    resp = client.post(f"/games/{gid}/moves", json={"playerId": a, "canvasData": "img1"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    state = client.get(f"/games/{gid}").json()
    assert (state["currentPlayerId"], state["canvasData"], state["status"]) == (b, "img1", "active")

    client.post(f"/games/{gid}/moves", json={"playerId": b, "canvasData": "img2"})
    state = client.get(f"/games/{gid}").json()
    assert (state["currentPlayerId"], state["canvasData"]) == (a, "img2")


def test_snapshot_round_trips_verbatim(client):
    g = _create(client)
    canvas = Canvas(64, 48)
    canvas.draw_stroke("pen", "#ff0000", [(4, 4), (60, 40)])
    snapshot = canvas.snapshot()

    client.post(
        f"/games/{g['gameId']}/moves",
        json={"playerId": g["player1Id"], "canvasData": snapshot},
    )
    assert client.get(f"/games/{g['gameId']}").json()["canvasData"] == snapshot


def test_move_on_unknown_game_creates_nothing(client, db):
    resp = client.post("/games/missing/moves", json={"playerId": "p", "canvasData": "img"})

    assert resp.status_code == 404
    assert resp.json() == {"error": "Game not found"}
    assert GameStore(db).count_moves("missing") == 0


def test_move_by_stranger_is_not_found(client):
    g = _create(client)

    resp = client.post(
        f"/games/{g['gameId']}/moves", json={"playerId": "stranger", "canvasData": "img"}
    )
    assert resp.status_code == 404
    assert resp.json() == {"error": "Player not in game"}


def test_malformed_move_body(client):
    g = _create(client)

    resp = client.post(f"/games/{g['gameId']}/moves", json={"canvasData": "img"})
    assert resp.status_code == 422


def test_out_of_turn_move_accepted_by_default(client):
    g = _create(client)

    resp = client.post(
        f"/games/{g['gameId']}/moves", json={"playerId": g["player2Id"], "canvasData": "img"}
    )
    assert resp.status_code == 200
    assert client.get(f"/games/{g['gameId']}").json()["currentPlayerId"] == g["player1Id"]


def test_out_of_turn_move_rejected_when_enforced(client, settings):
    settings.enforce_turn_order = True
    g = _create(client)

    resp = client.post(
        f"/games/{g['gameId']}/moves", json={"playerId": g["player2Id"], "canvasData": "img"}
    )
    assert resp.status_code == 409
    assert resp.json() == {"error": "Not your turn"}
    assert client.get(f"/games/{g['gameId']}/moves").json()["moves"] == []


def test_move_history(client):
    g = _create(client)
    gid, a, b = g["gameId"], g["player1Id"], g["player2Id"]
    client.post(f"/games/{gid}/moves", json={"playerId": a, "canvasData": "img1"})
    client.post(f"/games/{gid}/moves", json={"playerId": b, "canvasData": "img2"})

    body = client.get(f"/games/{gid}/moves").json()
    assert body["gameId"] == gid
    assert [(m["seq"], m["playerId"], m["canvasData"]) for m in body["moves"]] == [
        (1, a, "img1"),
        (2, b, "img2"),
    ]
    assert all(m["moveId"] and m["createdAt"] for m in body["moves"])


def test_move_history_unknown_game(client):
    assert client.get("/games/missing/moves").status_code == 404


def test_storage_failure_is_generic_500(client, monkeypatch):
    def boom(self):
        raise OperationalError("INSERT INTO games", {}, Exception("disk I/O error"))

    monkeypatch.setattr(GameStore, "create_game", boom)

    resp = client.post("/games")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}


class TestPages:
    def test_home(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert "Start New Game" in resp.text

    def test_game_room_embeds_ids_and_interval(self, client, settings):
        settings.poll_interval_ms = 1500
        resp = client.get("/game/g123/p456")

        assert resp.status_code == 200
        assert 'const GAME_ID = "g123";' in resp.text
        assert 'const PLAYER_ID = "p456";' in resp.text
        assert "const POLL_MS = 1500;" in resp.text
        assert "destination-out" in resp.text

    def test_game_room_escapes_ids(self, client):
        resp = client.get("/game/%3Cb%3E/p")

        assert "<code>&lt;b&gt;</code>" in resp.text

    def test_game_room_waits_for_confirmed_submit(self, client):
        resp = client.get("/game/g/p")

        assert "submitConfirmed" in resp.text
        assert "baseCanvas" in resp.text
