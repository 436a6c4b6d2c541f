"""Board geometry and occupancy for the duel arena."""

from __future__ import annotations

import enum
from collections.abc import Iterable

import numpy as np

GRID_SIZE = 30  # pixels per cell on the client canvas
CANVAS_WIDTH = 600
TILE_COUNT = CANVAS_WIDTH // GRID_SIZE


class CellType(enum.IntEnum):
    """Integer codes stored in the occupancy array."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2


class Grid:
    """NumPy-backed square board of ``tile_count`` × ``tile_count`` cells.

    Coordinates are ``(x, y)`` pairs; the array itself is indexed
    ``[y, x]`` so rows match the client's canvas rows.
    """

    def __init__(self, tile_count: int = TILE_COUNT) -> None:
        if tile_count < 4:
            raise ValueError("tile_count must be at least 4.")
        self.tile_count = tile_count
        self.cells = np.zeros((tile_count, tile_count), dtype=np.int8)

    def clear(self) -> None:
        """Reset all cells to empty."""
        self.cells[:] = CellType.EMPTY

    def in_bounds(self, x: int, y: int) -> bool:
        """Check whether a coordinate lies on the board."""
        return 0 <= x < self.tile_count and 0 <= y < self.tile_count

    def get(self, x: int, y: int) -> CellType:
        return CellType(self.cells[y, x])

    def set(self, x: int, y: int, cell_type: CellType) -> None:
        self.cells[y, x] = cell_type

    def paint(
        self,
        bodies: Iterable[Iterable[tuple[int, int]]],
        food: tuple[int, int] | None = None,
    ) -> None:
        """Rebuild occupancy from snake bodies and the food cell."""
        self.clear()
        for body in bodies:
            for x, y in body:
                if self.in_bounds(x, y):
                    self.cells[y, x] = CellType.SNAKE
        if food is not None and self.get(*food) == CellType.EMPTY:
            self.set(food[0], food[1], CellType.FOOD)

    def empty_cells(self) -> list[tuple[int, int]]:
        """Return all empty cells as ``(x, y)`` pairs."""
        ys, xs = np.where(self.cells == CellType.EMPTY)
        return list(zip(xs.tolist(), ys.tolist(), strict=True))
