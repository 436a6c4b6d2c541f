"""Snake Duel: authoritative two-player snake rooms."""

from snake_duel.config import ServerSettings
from snake_duel.engine import DuelEngine, MatchConfig, Player, PlayerSlot, TickResult
from snake_duel.errors import (
    InvalidInputError,
    RoomFullError,
    RoomNotFoundError,
    SnakeDuelError,
)
from snake_duel.grid import TILE_COUNT, Grid
from snake_duel.snake import Snake

__all__ = [
    "DuelEngine",
    "Grid",
    "InvalidInputError",
    "MatchConfig",
    "Player",
    "PlayerSlot",
    "RoomFullError",
    "RoomNotFoundError",
    "ServerSettings",
    "Snake",
    "SnakeDuelError",
    "TILE_COUNT",
    "TickResult",
]
