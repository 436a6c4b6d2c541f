"""Two-player tick-based simulation engine."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

import numpy as np

from snake_duel.food import FoodSpawner
from snake_duel.grid import TILE_COUNT, CellType, Grid
from snake_duel.snake import STILL, Snake, Velocity

logger = logging.getLogger(__name__)

MAX_PLAYERS = 2
FOOD_SCORE = 10


class PlayerSlot(str, enum.Enum):
    """Seat assigned to a player by join order."""

    P1 = "p1"
    P2 = "p2"


# Spawn head position as (x_fraction, y_fraction) of the board per slot.
_SPAWN_LAYOUT: dict[PlayerSlot, tuple[float, float]] = {
    PlayerSlot.P1: (0.25, 0.5),
    PlayerSlot.P2: (0.75, 0.5),
}


@dataclass(frozen=True)
class MatchConfig:
    """Configuration for a single room's simulation."""

    tile_count: int = TILE_COUNT
    food_score: int = FOOD_SCORE
    initial_length: int = 3
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.tile_count < 4:
            raise ValueError("tile_count must be at least 4.")
        if self.food_score < 1:
            raise ValueError("food_score must be at least 1.")
        if not 1 <= self.initial_length <= self.tile_count:
            raise ValueError(
                "initial_length must be between 1 and tile_count."
            )
        for slot in PlayerSlot:
            x, _ = self.spawn_point(slot)
            if x - (self.initial_length - 1) < 0:
                raise ValueError(
                    f"initial_length does not fit the spawn layout for {slot.name}; "
                    "increase tile_count or reduce length."
                )

    def spawn_point(self, slot: PlayerSlot) -> tuple[int, int]:
        x_frac, y_frac = _SPAWN_LAYOUT[slot]
        return int(self.tile_count * x_frac), int(self.tile_count * y_frac)


class Player:
    """A seated player: identity, cosmetics, score and snake."""

    __slots__ = ("player_id", "slot", "skin_id", "score", "snake")

    def __init__(
        self, player_id: str, slot: PlayerSlot, skin_id: int, snake: Snake,
    ) -> None:
        self.player_id = player_id
        self.slot = slot
        self.skin_id = skin_id
        self.score = 0
        self.snake = snake

    @property
    def position(self) -> tuple[int, int]:
        return self.snake.head

    @property
    def velocity(self) -> Velocity:
        return self.snake.velocity

    def to_dict(self) -> dict:
        x, y = self.position
        vel_x, vel_y = self.velocity
        return {
            "id": self.player_id,
            "role": self.slot.value,
            "skinId": self.skin_id,
            "x": x,
            "y": y,
            "velX": vel_x,
            "velY": vel_y,
            "score": self.score,
            "body": self.snake.to_list(),
        }


@dataclass
class TickResult:
    """What happened during one call to :meth:`DuelEngine.step`."""

    tick: int
    deaths: list[str] = field(default_factory=list)
    wall_resets: list[str] = field(default_factory=list)
    food_eaten_by: list[str] = field(default_factory=list)


class DuelEngine:
    """Step-based simulation for up to two snakes sharing one food cell.

    Each call to :meth:`step` moves every snake with a buffered velocity,
    resets snakes that leave the board, resolves food, and finally checks
    every head against every body. Dying never ends the match: the snake
    respawns at a random free spot with its score reset.
    """

    def __init__(self, config: MatchConfig | None = None) -> None:
        cfg = config or MatchConfig()
        self.config = cfg
        self.rng = np.random.default_rng(cfg.seed)
        self.grid = Grid(cfg.tile_count)
        self.players: dict[str, Player] = {}
        self.food = FoodSpawner(self.grid, rng=self.rng)
        self.food.spawn()
        self.tick = 0

    @property
    def player_count(self) -> int:
        return len(self.players)

    def add_player(self, player_id: str, skin_id: int = 0) -> Player:
        """Seat a player in the first free slot and return it."""
        if player_id in self.players:
            raise ValueError(f"Player {player_id} is already seated.")
        if len(self.players) >= MAX_PLAYERS:
            raise ValueError("No free player slot.")

        taken = {p.slot for p in self.players.values()}
        slot = next(s for s in PlayerSlot if s not in taken)
        x, y = self.config.spawn_point(slot)
        snake = Snake.horizontal(x, y, length=self.config.initial_length)
        player = Player(player_id, slot, skin_id, snake)
        self.players[player_id] = player
        self._repaint()
        if self.food.position in snake.body:
            self.food.spawn()
            self._repaint()
        return player

    def remove_player(self, player_id: str) -> Player | None:
        player = self.players.pop(player_id, None)
        if player is not None:
            self._repaint()
        return player

    def set_velocity(self, player_id: str, velocity: Velocity) -> bool:
        """Buffer a velocity for the next tick.

        Returns False if the change was rejected as a 180° reversal.
        Raises ``KeyError`` for an unknown player and ``ValueError`` for a
        malformed vector.
        """
        player = self.players.get(player_id)
        if player is None:
            raise KeyError(player_id)
        return player.snake.buffer_velocity(velocity)

    def step(self) -> TickResult:
        """Advance the simulation by one tick."""
        self.tick += 1
        result = TickResult(tick=self.tick)
        players = list(self.players.values())

        for player in players:
            snake = player.snake
            if not snake.moving:
                snake.last_velocity = STILL
                continue

            new_head = snake.next_head()
            if not self.grid.in_bounds(*new_head):
                self._reset(player)
                result.wall_resets.append(player.player_id)
                logger.debug(
                    "Player %s left the board at tick %d.",
                    player.player_id, self.tick,
                )
                continue

            grow = self.food.eaten_at(new_head)
            snake.advance(new_head, grow=grow)
            if grow:
                player.score += self.config.food_score
                result.food_eaten_by.append(player.player_id)
                self._repaint()
                self.food.spawn()

        # Every head against every body, including its own minus the head.
        for mover in players:
            head = mover.snake.head
            for target in players:
                if target.snake.hits(head, skip_head=target is mover):
                    logger.info(
                        "Player %s crashed into %s at tick %d with score %d.",
                        mover.player_id,
                        "itself" if target is mover else target.player_id,
                        self.tick,
                        mover.score,
                    )
                    result.deaths.append(mover.player_id)
                    self._reset(mover)
                    break

        self._repaint()
        return result

    def _reset(self, player: Player) -> None:
        """Respawn a player at a random free spot with score zeroed."""
        length = self.config.initial_length
        size = self.config.tile_count
        self._repaint(exclude=player.player_id)
        occupied = self.grid.cells == CellType.SNAKE

        # Candidate heads whose +y body column stays on the board and free.
        rows = size - length + 1
        free = np.ones((rows, size), dtype=bool)
        for offset in range(length):
            free &= ~occupied[offset:offset + rows, :]
        ys, xs = np.nonzero(free)
        if len(ys):
            idx = int(self.rng.integers(len(ys)))
            x, y = int(xs[idx]), int(ys[idx])
        else:
            x, y = int(self.rng.integers(size)), int(self.rng.integers(rows))

        player.snake.respawn(x, y, length=length)
        player.score = 0
        self._repaint()

    def _repaint(self, exclude: str | None = None) -> None:
        self.grid.paint(
            (p.snake.body for p in self.players.values() if p.player_id != exclude),
            food=self.food.position,
        )

    def get_state(self) -> dict:
        """Return the full, serializable room state."""
        return {
            "tick": self.tick,
            "players": {pid: p.to_dict() for pid, p in self.players.items()},
            "food": self.food.to_dict(),
        }
