"""Tests for protocol parsing and framing."""

import json

import pytest

from snake_duel.errors import InvalidInputError
from snake_duel.server.connections import encode
from snake_duel.server.models import (
    CreateRoomRequest,
    Event,
    JoinRequest,
    PlayerInputRequest,
    parse_request,
)


class TestParseCreateRoom:
    def test_bare_skin_id(self):
        req = parse_request({"type": "create-room", "data": 2})
        assert isinstance(req, CreateRoomRequest)
        assert req.skin_id == 2

    def test_object_payload(self):
        req = parse_request({"type": "create-room", "data": {"skinId": 3}})
        assert req.skin_id == 3

    def test_missing_payload_defaults(self):
        req = parse_request({"type": "create-room"})
        assert req.skin_id == 0

    def test_negative_skin_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_request({"type": "create-room", "data": -1})


class TestParseJoin:
    def test_valid(self):
        req = parse_request(
            {"type": "join-room", "data": {"roomId": "ABCDE", "skinId": 1}},
        )
        assert isinstance(req, JoinRequest)
        assert req.room_id == "ABCDE"
        assert req.skin_id == 1

    def test_bare_string_rejected(self):
        with pytest.raises(InvalidInputError):
            parse_request({"type": "join-room", "data": "ABCDE"})

    def test_missing_room_id(self):
        with pytest.raises(InvalidInputError, match="roomId"):
            parse_request({"type": "join-room", "data": {"skinId": 1}})


class TestParseInput:
    def test_valid(self):
        req = parse_request(
            {"type": "player-input", "data": {"roomId": "R", "velX": 1, "velY": 0}},
        )
        assert isinstance(req, PlayerInputRequest)
        assert req.velocity == (1, 0)

    @pytest.mark.parametrize("vel_x", [2, -2, "left", None, True, "1", 1.0])
    def test_out_of_range(self, vel_x):
        with pytest.raises(InvalidInputError):
            parse_request(
                {"type": "player-input",
                 "data": {"roomId": "R", "velX": vel_x, "velY": 0}},
            )


class TestParseEnvelope:
    @pytest.mark.parametrize(
        "raw",
        [[], 123, "text", {"type": "launch-missiles"}, {"data": 1}],
    )
    def test_malformed(self, raw):
        with pytest.raises(InvalidInputError):
            parse_request(raw)


class TestEncode:
    def test_event_frame(self):
        frame = json.loads(encode(Event.PLAYER_JOINED, {"playerCount": 2}))
        assert frame == {"event": "player-joined", "data": {"playerCount": 2}}

    def test_no_payload(self):
        frame = json.loads(encode(Event.GAME_START))
        assert frame == {"event": "game-start", "data": None}
