"""A single two-player room: seats, lifecycle and its tick task."""

from __future__ import annotations

import asyncio
import logging

from snake_duel.config import ServerSettings
from snake_duel.engine import MAX_PLAYERS, DuelEngine, Player, TickResult
from snake_duel.errors import RoomFullError, RoomNotFoundError
from snake_duel.server.connections import Notifier
from snake_duel.server.models import Event, RoomStatus, RoomSummary

logger = logging.getLogger(__name__)


class Room:
    """All state for one match.

    ``WAITING`` → ``RUNNING`` when the second player is seated, and
    ``CLOSED`` once the last player leaves. The tick task only exists while
    the room is running.
    """

    def __init__(
        self, room_id: str, settings: ServerSettings, notifier: Notifier,
    ) -> None:
        self.room_id = room_id
        self.settings = settings
        self.notifier = notifier
        self.engine = DuelEngine(settings.match_config())
        self.status = RoomStatus.WAITING
        self._task: asyncio.Task | None = None

    @property
    def players(self) -> dict[str, Player]:
        return self.engine.players

    @property
    def player_count(self) -> int:
        return self.engine.player_count

    @property
    def is_full(self) -> bool:
        return self.player_count >= MAX_PLAYERS

    @property
    def connection_ids(self) -> list[str]:
        return list(self.engine.players)

    @property
    def ticking(self) -> bool:
        return self._task is not None and not self._task.done()

    def seat(self, connection_id: str, skin_id: int = 0) -> Player:
        """Seat a connection in the first free slot."""
        if self.status == RoomStatus.CLOSED:
            raise RoomNotFoundError(self.room_id)
        if self.is_full:
            raise RoomFullError(self.room_id)
        player = self.engine.add_player(connection_id, skin_id)
        logger.info(
            "Connection %s seated in room %s as %s.",
            connection_id, self.room_id, player.slot.name,
        )
        return player

    def unseat(self, connection_id: str) -> Player | None:
        player = self.engine.remove_player(connection_id)
        if player is not None:
            logger.info(
                "Connection %s left room %s (%d remaining).",
                connection_id, self.room_id, self.player_count,
            )
        return player

    async def start(self) -> bool:
        """Enter ``RUNNING``: announce the start, then begin ticking.

        Returns False if the room was not waiting.
        """
        if self.status != RoomStatus.WAITING:
            return False
        self.status = RoomStatus.RUNNING
        await self.notifier.broadcast(self.connection_ids, Event.GAME_START)
        self._task = asyncio.create_task(
            self._tick_loop(), name=f"room-{self.room_id}-ticks",
        )
        logger.info(
            "Room %s started at %.1f Hz.", self.room_id, self.settings.tick_rate_hz,
        )
        return True

    def close(self) -> None:
        """Release the tick task and mark the room closed. Idempotent."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        if self.status != RoomStatus.CLOSED:
            self.status = RoomStatus.CLOSED
            logger.info("Room %s closed.", self.room_id)

    async def wait_closed(self) -> None:
        """Wait for a cancelled tick task to finish unwinding."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)

    async def _tick_loop(self) -> None:
        """Run ticks on fixed deadlines until the room stops running."""
        loop = asyncio.get_running_loop()
        interval = self.settings.tick_interval
        deadline = loop.time()
        try:
            while self.status == RoomStatus.RUNNING:
                deadline += interval
                now = loop.time()
                if deadline < now - interval:
                    # Fell more than a tick behind; resync instead of bursting.
                    deadline = now
                await asyncio.sleep(max(0.0, deadline - now))
                if self.status != RoomStatus.RUNNING:
                    break
                try:
                    await self.tick()
                except Exception:
                    logger.exception("Tick failed in room %s.", self.room_id)
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for room %s.", self.room_id)

    async def tick(self) -> TickResult:
        """Advance the simulation once and broadcast the outcome."""
        result = self.engine.step()
        for player_id in result.deaths:
            await self.notifier.broadcast(
                self.connection_ids, Event.PLAYER_DIED, {"playerId": player_id},
            )
        await self.notifier.broadcast(
            self.connection_ids, Event.GAME_STATE, self.engine.get_state(),
        )
        return result

    def summary(self) -> RoomSummary:
        return RoomSummary(
            room_id=self.room_id,
            status=self.status,
            player_count=self.player_count,
            max_players=MAX_PLAYERS,
        )
