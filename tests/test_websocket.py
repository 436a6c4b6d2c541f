"""WebSocket integration tests for the duel protocol."""

from __future__ import annotations

import json
import time

import pytest
from starlette.testclient import TestClient

from snake_duel.config import ServerSettings
from snake_duel.server.app import create_app


@pytest.fixture()
def tc():
    """Starlette TestClient used as a context manager so every socket shares
    one event loop with the room tick tasks."""
    application = create_app(ServerSettings(tick_rate_hz=50, seed=0))
    with TestClient(application) as client:
        yield client


def _send(ws, intent: str, data=None) -> None:
    ws.send_text(json.dumps({"type": intent, "data": data}))


def _recv(ws) -> tuple[str, object]:
    frame = json.loads(ws.receive_text())
    return frame["event"], frame["data"]


def _recv_until(ws, event: str, limit: int = 200):
    """Skip frames (mostly per-tick game-state) until *event* arrives."""
    for _ in range(limit):
        name, data = _recv(ws)
        if name == event:
            return data
    raise AssertionError(f"{event} not received")


def _create(ws, skin: int = 0) -> str:
    _send(ws, "create-room", skin)
    name, room_id = _recv(ws)
    assert name == "room-created"
    return room_id


class TestCreateAndJoin:
    def test_create_room_flow(self, tc):
        with tc.websocket_connect("/ws") as ws:
            room_id = _create(ws)
            name, joined = _recv(ws)
            assert name == "joined-room"
            assert joined["roomId"] == room_id
            assert joined["role"] == "p1"
            name, state = _recv(ws)
            assert name == "game-state"
            assert joined["playerId"] in state["players"]
            assert state["food"] is not None

    def test_join_starts_game(self, tc):
        with tc.websocket_connect("/ws") as p1, tc.websocket_connect("/ws") as p2:
            room_id = _create(p1)
            _send(p2, "join-room", {"roomId": room_id, "skinId": 1})

            name, joined = _recv(p2)
            assert name == "joined-room"
            assert joined["role"] == "p2"
            assert _recv(p2) == ("player-joined", {"playerCount": 2})
            assert _recv(p2) == ("game-start", None)

            assert _recv_until(p1, "player-joined") == {"playerCount": 2}
            _recv_until(p1, "game-start")
            state = _recv_until(p1, "game-state")
            assert len(state["players"]) == 2

    def test_third_player_gets_room_full(self, tc):
        with tc.websocket_connect("/ws") as p1, \
                tc.websocket_connect("/ws") as p2, \
                tc.websocket_connect("/ws") as p3:
            room_id = _create(p1)
            _send(p2, "join-room", {"roomId": room_id, "skinId": 0})
            _recv_until(p2, "game-start")
            _send(p3, "join-room", {"roomId": room_id, "skinId": 0})
            assert _recv(p3) == ("error", "Room is full")

    def test_join_unknown_room(self, tc):
        with tc.websocket_connect("/ws") as ws:
            _send(ws, "join-room", {"roomId": "NOPE1", "skinId": 0})
            assert _recv(ws) == ("error", "Room not found")


class TestInput:
    def test_input_moves_snake(self, tc):
        with tc.websocket_connect("/ws") as p1, tc.websocket_connect("/ws") as p2:
            room_id = _create(p1)
            player_id = _recv_until(p1, "joined-room")["playerId"]
            _send(p2, "join-room", {"roomId": room_id, "skinId": 1})
            _recv_until(p1, "game-start")

            _send(p1, "player-input", {"roomId": room_id, "velX": 0, "velY": -1})
            for _ in range(200):
                state = _recv_until(p1, "game-state")
                me = state["players"][player_id]
                if me["velY"] == -1 and me["y"] < 10:
                    break
            else:
                raise AssertionError("snake never moved")
            assert me["x"] == 5

    def test_input_for_unknown_room(self, tc):
        with tc.websocket_connect("/ws") as ws:
            _send(ws, "player-input", {"roomId": "GONE1", "velX": 1, "velY": 0})
            assert _recv(ws) == ("error", "Room not found")

    def test_malformed_frames_report_errors(self, tc):
        with tc.websocket_connect("/ws") as ws:
            ws.send_text("not-json")
            assert _recv(ws) == ("error", "Malformed JSON")
            for raw in ("[]", "123", json.dumps({"type": "dance"})):
                ws.send_text(raw)
                name, message = _recv(ws)
                assert name == "error"
                assert message.startswith("Invalid")
            ws.send_bytes(b"\x00\x01")
            assert _recv(ws) == ("error", "Malformed frame")
            # The socket survives bad input.
            room_id = _create(ws)
            assert room_id

    def test_binary_frame_keeps_seat(self, tc):
        with tc.websocket_connect("/ws") as p1:
            room_id = _create(p1)
            with tc.websocket_connect("/ws") as p2:
                _send(p2, "join-room", {"roomId": room_id, "skinId": 1})
                _recv_until(p2, "game-start")
                p2.send_bytes(b"\xff")
                assert _recv_until(p2, "error") == "Malformed frame"
                _send(p2, "player-input", {"roomId": room_id, "velX": 0, "velY": 1})
                state = _recv_until(p2, "game-state")
                assert len(state["players"]) == 2

    def test_bad_velocity_reported(self, tc):
        with tc.websocket_connect("/ws") as ws:
            room_id = _create(ws)
            _recv_until(ws, "game-state")
            _send(ws, "player-input", {"roomId": room_id, "velX": 5, "velY": 0})
            assert _recv_until(ws, "error").startswith("Invalid")


class TestDisconnect:
    def test_opponent_notified(self, tc):
        with tc.websocket_connect("/ws") as p1:
            room_id = _create(p1)
            with tc.websocket_connect("/ws") as p2:
                _send(p2, "join-room", {"roomId": room_id, "skinId": 1})
                _recv_until(p2, "game-start")
            _recv_until(p1, "player-left")
            registry = tc.app.state.registry
            room = registry.get_room(room_id)
            assert room is not None
            assert room.player_count == 1

    def test_last_disconnect_removes_room(self, tc):
        registry = tc.app.state.registry
        with tc.websocket_connect("/ws") as ws:
            room_id = _create(ws)
            assert room_id in registry
        for _ in range(200):
            if room_id not in registry:
                break
            time.sleep(0.01)
        with tc.websocket_connect("/ws") as probe:
            _send(probe, "join-room", {"roomId": room_id, "skinId": 0})
            assert _recv(probe) == ("error", "Room not found")
        assert room_id not in registry
