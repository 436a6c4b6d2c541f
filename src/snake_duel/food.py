"""Food placement logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from snake_duel.grid import Grid

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Places the room's single food cell.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    Candidates are the grid's empty cells; when the board is completely
    covered the food falls back to any uniformly random cell.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        self.position: tuple[int, int] | None = None

    def spawn(self) -> tuple[int, int]:
        """Move the food to a new cell and return it.

        The grid must already reflect current snake occupancy.
        """
        empty = self.grid.empty_cells()
        if empty:
            pos = empty[int(self.rng.integers(len(empty)))]
        else:
            logger.warning("No empty cells for food; placing on an occupied cell.")
            size = self.grid.tile_count
            pos = (int(self.rng.integers(size)), int(self.rng.integers(size)))
        self.position = pos
        return pos

    def eaten_at(self, cell: tuple[int, int]) -> bool:
        return self.position == cell

    def to_dict(self) -> dict | None:
        if self.position is None:
            return None
        return {"x": self.position[0], "y": self.position[1]}
