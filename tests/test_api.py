"""
HTTP endpoint tests using FastAPI TestClient.
"""
from contextlib import ExitStack

from conftest import create_lobby, joined, recv_until


def test_create_lobby(client):
    res = client.post("/api/v1/lobbies")
    assert res.status_code == 200
    code = res.json()["code"]
    assert len(code) == 6
    assert code.isalpha() and code.islower()


def test_get_lobby_not_found(client):
    res = client.get("/api/v1/lobbies/invalid")
    assert res.status_code == 404
    assert res.json() == {"detail": "lobby not found"}


def test_fresh_lobby_details(client):
    code = create_lobby(client)
    res = client.get(f"/api/v1/lobbies/{code}")
    assert res.status_code == 200
    body = res.json()
    assert body["code"] == code
    assert body["players"] == []
    assert 890 <= body["expires_in"] <= 900
    assert "expires_at" in body


def test_lobby_details_list_players(client):
    code = create_lobby(client)
    with joined(client, code, "Ann"), joined(client, code, "Bob"):
        body = client.get(f"/api/v1/lobbies/{code}").json()
        assert body["players"] == ["Ann", "Bob"]


def test_start_unknown_lobby(client):
    res = client.post("/api/v1/lobbies/zzzzzz/start", json={"imposters": 1})
    assert res.status_code == 404


def test_start_too_many_imposters(client):
    code = create_lobby(client)
    res = client.post(f"/api/v1/lobbies/{code}/start", json={"imposters": 5})
    assert res.status_code == 400


def test_start_bad_body(client):
    code = create_lobby(client)
    assert client.post(f"/api/v1/lobbies/{code}/start", json={}).status_code == 400
    assert client.post(f"/api/v1/lobbies/{code}/start", json={"imposters": "many"}).status_code == 400
    assert client.post(f"/api/v1/lobbies/{code}/start", content=b"not json").status_code == 400


def test_imposter_count_must_be_a_json_integer(client):
    code = create_lobby(client)
    with joined(client, code, "Ann"), joined(client, code, "Bob"), joined(client, code, "Cid"):
        assert client.post(f"/api/v1/lobbies/{code}/start", json={"imposters": "1"}).status_code == 400
        assert client.post(f"/api/v1/lobbies/{code}/start", json={"imposters": 1.0}).status_code == 400
        assert client.post(f"/api/v1/lobbies/{code}/restart", json={"imposters": "2"}).status_code == 400
        assert client.post(f"/api/v1/lobbies/{code}/start", json={"imposters": 1}).status_code == 200


def test_start_end_restart(client):
    code = create_lobby(client)
    with ExitStack() as stack:
        sockets = [stack.enter_context(joined(client, code, n)) for n in ("Ann", "Bob", "Cid")]

        res = client.post(f"/api/v1/lobbies/{code}/start", json={"imposters": 1})
        assert res.status_code == 200
        assert res.json() == {"status": "game started"}
        for ws in sockets:
            recv_until(ws, "game_started")

        res = client.post(f"/api/v1/lobbies/{code}/end")
        assert res.json() == {"status": "game ended"}
        for ws in sockets:
            assert recv_until(ws, "game_ended") == {"type": "game_ended", "code": code}

        res = client.post(f"/api/v1/lobbies/{code}/restart")
        assert res.status_code == 200
        assert res.json() == {"status": "game restarted"}
        roles = [recv_until(ws, "game_started")["role"] for ws in sockets]
        assert roles.count("imposter") == 1

        res = client.post(f"/api/v1/lobbies/{code}/restart", json={"imposters": 2})
        assert res.status_code == 200
        roles = [recv_until(ws, "game_started")["role"] for ws in sockets]
        assert roles.count("imposter") == 2


def test_end_unknown_lobby(client):
    assert client.post("/api/v1/lobbies/zzzzzz/end").status_code == 404


def test_restart_unknown_lobby(client):
    assert client.post("/api/v1/lobbies/zzzzzz/restart").status_code == 404


def test_restart_without_previous_round(client):
    code = create_lobby(client)
    with joined(client, code, "Ann"), joined(client, code, "Bob"):
        res = client.post(f"/api/v1/lobbies/{code}/restart")
        assert res.status_code == 400
        assert res.json() == {"detail": "imposters must be 1 to 1"}
