"""Pydantic models for the WebSocket protocol and REST responses."""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from snake_duel.errors import InvalidInputError


class RoomStatus(str, enum.Enum):
    """Lifecycle states for a room."""

    WAITING = "waiting"
    RUNNING = "running"
    CLOSED = "closed"


class Intent(str, enum.Enum):
    """Client → server message types."""

    CREATE_ROOM = "create-room"
    JOIN_ROOM = "join-room"
    PLAYER_INPUT = "player-input"


class Event(str, enum.Enum):
    """Server → client message types."""

    ROOM_CREATED = "room-created"
    JOINED_ROOM = "joined-room"
    PLAYER_JOINED = "player-joined"
    GAME_START = "game-start"
    GAME_STATE = "game-state"
    PLAYER_DIED = "player-died"
    PLAYER_LEFT = "player-left"
    ERROR = "error"


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CreateRoomRequest(_Payload):
    """Payload of ``create-room``."""

    skin_id: int = Field(default=0, ge=0, alias="skinId")


class JoinRequest(_Payload):
    """Payload of ``join-room``."""

    room_id: str = Field(min_length=1, max_length=16, alias="roomId")
    skin_id: int = Field(default=0, ge=0, alias="skinId")


class PlayerInputRequest(_Payload):
    """Payload of ``player-input``."""

    room_id: str = Field(min_length=1, max_length=16, alias="roomId")
    vel_x: StrictInt = Field(ge=-1, le=1, alias="velX")
    vel_y: StrictInt = Field(ge=-1, le=1, alias="velY")

    @property
    def velocity(self) -> tuple[int, int]:
        return self.vel_x, self.vel_y


class ClientMessage(BaseModel):
    """Envelope for every client frame."""

    type: Intent
    data: Any = None


class ServerMessage(BaseModel):
    """Envelope for every server frame."""

    event: Event
    data: Any = None


Request = CreateRoomRequest | JoinRequest | PlayerInputRequest


def parse_request(raw: Any) -> Request:
    """Validate a decoded client frame into its tagged request variant.

    Raises :class:`InvalidInputError` for anything that does not validate.
    """
    try:
        msg = ClientMessage.model_validate(raw)
        if msg.type == Intent.CREATE_ROOM:
            data = msg.data
            # A bare integer is accepted as the skin id.
            if data is None:
                data = {}
            elif isinstance(data, int) and not isinstance(data, bool):
                data = {"skinId": data}
            return CreateRoomRequest.model_validate(data)
        if msg.type == Intent.JOIN_ROOM:
            return JoinRequest.model_validate(msg.data)
        return PlayerInputRequest.model_validate(msg.data)
    except ValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first["loc"]) or "message"
        raise InvalidInputError(f"Invalid {where}: {first['msg']}") from exc


class RoomSummary(BaseModel):
    """Compact room info for list endpoints."""

    room_id: str
    status: RoomStatus
    player_count: int
    max_players: int


class BoardInfo(BaseModel):
    """Board constants clients need for rendering."""

    tile_count: int
    grid_size: int
    canvas_size: int
    tick_rate_hz: float


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
