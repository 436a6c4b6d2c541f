"""In-memory room registry and the intent operations that act on it."""

from __future__ import annotations

import asyncio
import logging
import secrets
import string

from snake_duel.config import ServerSettings
from snake_duel.engine import Player
from snake_duel.errors import InvalidInputError, RoomNotFoundError
from snake_duel.server.connections import Notifier
from snake_duel.server.models import (
    CreateRoomRequest,
    Event,
    JoinRequest,
    PlayerInputRequest,
    RoomStatus,
    RoomSummary,
)
from snake_duel.server.room import Room

logger = logging.getLogger(__name__)

_CODE_ALPHABET = string.ascii_uppercase + string.digits
_MAX_CODE_ATTEMPTS = 100


class RoomRegistry:
    """Owns every open room and the connection → room index.

    All methods run on the event loop thread; intents and ticks never
    interleave mid-operation, so no locking is needed.
    """

    def __init__(
        self, notifier: Notifier, settings: ServerSettings | None = None,
    ) -> None:
        self.notifier = notifier
        self.settings = settings or ServerSettings()
        self._rooms: dict[str, Room] = {}
        self._seats: dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: str) -> bool:
        return room_id in self._rooms

    def get_room(self, room_id: str) -> Room | None:
        return self._rooms.get(room_id)

    def require_room(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def room_of(self, connection_id: str) -> Room | None:
        room_id = self._seats.get(connection_id)
        return self._rooms.get(room_id) if room_id is not None else None

    def list_rooms(self) -> list[RoomSummary]:
        return [room.summary() for room in self._rooms.values()]

    def _new_code(self) -> str:
        length = self.settings.room_code_length
        for _ in range(_MAX_CODE_ATTEMPTS):
            code = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))
            if code not in self._rooms:
                return code
        raise RuntimeError("Could not allocate a unique room code.")

    def _ensure_unseated(self, connection_id: str) -> None:
        room_id = self._seats.get(connection_id)
        if room_id is not None:
            raise InvalidInputError(f"Already in room {room_id}")

    async def create_room(
        self, connection_id: str, request: CreateRoomRequest | None = None,
    ) -> Room:
        """Create a room and seat its creator as P1."""
        request = request or CreateRoomRequest()
        self._ensure_unseated(connection_id)

        room = Room(self._new_code(), self.settings, self.notifier)
        player = room.seat(connection_id, request.skin_id)
        self._rooms[room.room_id] = room
        self._seats[connection_id] = room.room_id
        logger.info("Room %s created by %s.", room.room_id, connection_id)

        await self.notifier.send(connection_id, Event.ROOM_CREATED, room.room_id)
        await self._confirm_seat(room, player)
        await self.notifier.send(
            connection_id, Event.GAME_STATE, room.engine.get_state(),
        )
        return room

    async def join_room(self, connection_id: str, request: JoinRequest) -> Player:
        """Seat a connection in an existing room, starting it when full."""
        self._ensure_unseated(connection_id)
        room = self.require_room(request.room_id)
        player = room.seat(connection_id, request.skin_id)
        self._seats[connection_id] = room.room_id

        await self._confirm_seat(room, player)
        await self.notifier.broadcast(
            room.connection_ids, Event.PLAYER_JOINED,
            {"playerCount": room.player_count},
        )
        if room.is_full:
            if room.status == RoomStatus.WAITING:
                await room.start()
            else:
                # Refilling a freed seat in a room that is already ticking.
                await self.notifier.send(connection_id, Event.GAME_START)
        return player

    async def _confirm_seat(self, room: Room, player: Player) -> None:
        await self.notifier.send(
            player.player_id,
            Event.JOINED_ROOM,
            {
                "roomId": room.room_id,
                "playerId": player.player_id,
                "role": player.slot.value,
            },
        )

    async def handle_input(
        self, connection_id: str, request: PlayerInputRequest,
    ) -> bool:
        """Buffer a velocity for the sender. Returns False on a rejected reversal."""
        room = self.require_room(request.room_id)
        if connection_id not in room.players:
            raise InvalidInputError(f"Not a player in room {room.room_id}")
        try:
            return room.engine.set_velocity(connection_id, request.velocity)
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc

    async def remove_player(self, room_id: str, connection_id: str) -> None:
        """Detach a player; close and delete the room once it is empty."""
        room = self.require_room(room_id)
        if room.unseat(connection_id) is None:
            return
        if self._seats.get(connection_id) == room_id:
            del self._seats[connection_id]

        if room.player_count == 0:
            room.close()
            del self._rooms[room_id]
            logger.info("Room %s removed from registry.", room_id)
            return
        await self.notifier.broadcast(room.connection_ids, Event.PLAYER_LEFT)

    async def disconnect(self, connection_id: str) -> None:
        """Clean up after a closed connection, if it was seated anywhere."""
        room_id = self._seats.get(connection_id)
        if room_id is None or room_id not in self._rooms:
            self._seats.pop(connection_id, None)
            return
        await self.remove_player(room_id, connection_id)

    async def close_all(self) -> None:
        """Close every room and wait for all tick tasks to unwind."""
        rooms = list(self._rooms.values())
        for room in rooms:
            room.close()
        if rooms:
            await asyncio.gather(*(room.wait_closed() for room in rooms))
        self._rooms.clear()
        self._seats.clear()
        logger.info("RoomRegistry closed %d room(s).", len(rooms))
