"""Server configuration."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path

from snake_duel.engine import FOOD_SCORE, MatchConfig
from snake_duel.grid import GRID_SIZE, TILE_COUNT

logger = logging.getLogger(__name__)

ENV_PREFIX = "SNAKE_DUEL_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ServerSettings:
    """Runtime settings for the duel server.

    Values come from defaults, a JSON file (:meth:`load`) or
    ``SNAKE_DUEL_*`` environment variables (:meth:`from_env`).
    """

    # Network
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"

    # Board
    tile_count: int = TILE_COUNT
    grid_size: int = GRID_SIZE

    # Simulation
    tick_rate_hz: float = 8.0
    food_score: int = FOOD_SCORE
    initial_length: int = 3
    seed: int | None = None

    # Rooms
    room_code_length: int = 5

    def __post_init__(self) -> None:
        if not 0 < self.port < 65536:
            raise ValueError("port must be between 1 and 65535.")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}.")
        if self.tick_rate_hz <= 0:
            raise ValueError("tick_rate_hz must be positive.")
        if self.grid_size < 1:
            raise ValueError("grid_size must be at least 1.")
        if self.room_code_length < 4:
            raise ValueError("room_code_length must be at least 4.")
        # Surfaces board/length problems at startup rather than on first room.
        self.match_config()

    @property
    def tick_interval(self) -> float:
        """Seconds between ticks."""
        return 1.0 / self.tick_rate_hz

    @property
    def canvas_size(self) -> int:
        return self.tile_count * self.grid_size

    def match_config(self) -> MatchConfig:
        return MatchConfig(
            tile_count=self.tile_count,
            food_score=self.food_score,
            initial_length=self.initial_length,
            seed=self.seed,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def with_overrides(self, **overrides) -> ServerSettings:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    @classmethod
    def load(cls, path: str | Path) -> ServerSettings:
        """Load settings from a JSON file."""
        raw = json.loads(Path(path).read_text())
        known = {f.name for f in fields(cls)}
        unknown = set(raw) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}.")
        settings = cls(**raw)
        logger.info("Settings loaded from %s", path)
        return settings

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerSettings:
        """Build settings from ``SNAKE_DUEL_*`` environment variables."""
        env = os.environ if environ is None else environ
        values: dict = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            values[f.name] = _coerce(f.name, raw)
        return cls(**values)


_INT_FIELDS = {"port", "tile_count", "grid_size", "food_score", "initial_length",
               "room_code_length", "seed"}
_FLOAT_FIELDS = {"tick_rate_hz"}


def _coerce(name: str, raw: str):
    try:
        if name in _INT_FIELDS:
            return int(raw)
        if name in _FLOAT_FIELDS:
            return float(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name.upper()} has invalid value {raw!r}.") from exc
    return raw
