def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "healthy"}


def test_unknown_room_returns_404(client):
    res = client.get("/rooms/ZZZZZZ")
    assert res.status_code == 404


def test_create_and_join_over_websocket(client):
    with client.websocket_connect("/ws") as ws_a, client.websocket_connect("/ws") as ws_b:
        ws_a.send_json({"type": "create_room"})
        created = ws_a.receive_json()
        assert created["type"] == "room_created"
        assert created["playerId"] == "A"
        room_id = created["roomId"]
        assert len(room_id) == 6 and room_id == room_id.upper()

        ws_b.send_json({"type": "join_room", "roomId": room_id.lower()})
        assert ws_b.receive_json() == {"type": "room_joined", "roomId": room_id, "playerId": "B"}
        assert ws_a.receive_json() == {"type": "player_joined", "playerId": "B"}

        listing = client.get("/rooms").json()
        assert {"roomId": room_id, "playerCount": 2, "phase": "waiting"} in listing

        detail = client.get(f"/rooms/{room_id.lower()}").json()
        assert [p["playerId"] for p in detail["players"]] == ["A", "B"]
        assert detail["config"]["targetLevel"] == 15


def test_full_match_flow(client):
    with client.websocket_connect("/ws") as ws_a, client.websocket_connect("/ws") as ws_b:
        ws_a.send_json({"type": "create_room"})
        room_id = ws_a.receive_json()["roomId"]
        ws_b.send_json({"type": "join_room", "roomId": room_id})
        ws_b.receive_json()
        ws_a.receive_json()

        ws_a.send_json({"type": "ready"})
        assert ws_a.receive_json() == {"type": "player_ready", "playerId": "A"}
        assert ws_b.receive_json() == {"type": "player_ready", "playerId": "A"}

        ws_b.send_json({"type": "ready"})
        for ws in (ws_a, ws_b):
            assert ws.receive_json() == {"type": "player_ready", "playerId": "B"}
            assert ws.receive_json() == {"type": "countdown_start"}
            assert ws.receive_json() == {"type": "game_start"}

        ws_b.send_json({"type": "score", "score": 30, "level": 4})
        assert ws_a.receive_json() == {"type": "opponent_score", "playerId": "B", "score": 30, "level": 4}

        ws_a.send_json({"type": "wrong"})
        assert ws_b.receive_json() == {"type": "opponent_wrong", "playerId": "A"}

        ws_a.send_json({"type": "score", "score": 100, "level": 16})
        game_over = {"type": "game_over", "winner": "A", "scores": {"A": 100, "B": 30}}
        assert ws_b.receive_json() == {"type": "opponent_score", "playerId": "A", "score": 100, "level": 16}
        assert ws_b.receive_json() == game_over
        assert ws_a.receive_json() == game_over

        ws_b.send_json({"type": "restart"})
        assert ws_a.receive_json() == {"type": "game_reset"}
        assert ws_b.receive_json() == {"type": "game_reset"}


def test_errors_and_garbage_keep_connection_open(client):
    with client.websocket_connect("/ws") as ws:
        ws.send_text("{{{ not json")
        ws.send_json({"no": "type"})
        ws.send_bytes(b"\x00\x01")
        ws.send_json({"type": "join_room", "roomId": "ZZZZZZ"})
        reply = ws.receive_json()
        assert reply["type"] == "error"
        assert reply["message"] == "Room ZZZZZZ not found"

        ws.send_json({"type": "ready"})
        assert ws.receive_json() == {"type": "error", "message": "Not in a room"}

        ws.send_json({"type": "create_room"})
        assert ws.receive_json()["type"] == "room_created"


def test_disconnect_notifies_remaining_player(client):
    with client.websocket_connect("/ws") as ws_a:
        ws_a.send_json({"type": "create_room"})
        room_id = ws_a.receive_json()["roomId"]

        with client.websocket_connect("/") as ws_b:
            ws_b.send_json({"type": "join_room", "roomId": room_id})
            ws_b.receive_json()
            ws_a.receive_json()

        assert ws_a.receive_json() == {"type": "player_left", "playerId": "B"}
        detail = client.get(f"/rooms/{room_id}").json()
        assert [p["playerId"] for p in detail["players"]] == ["A"]
