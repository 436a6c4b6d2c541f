"""Tests for the FoodSpawner module."""

import numpy as np

from snake_duel.food import FoodSpawner
from snake_duel.grid import Grid


class TestFoodSpawner:
    def test_starts_without_position(self):
        spawner = FoodSpawner(Grid(tile_count=5))
        assert spawner.position is None
        assert spawner.to_dict() is None

    def test_spawn_on_board(self):
        grid = Grid(tile_count=5)
        spawner = FoodSpawner(grid, rng=np.random.default_rng(0))
        x, y = spawner.spawn()
        assert grid.in_bounds(x, y)
        assert spawner.to_dict() == {"x": x, "y": y}

    def test_spawn_avoids_snake_cells(self):
        grid = Grid(tile_count=4)
        body = [(x, y) for y in range(4) for x in range(4) if (x, y) != (2, 3)]
        grid.paint([body])
        spawner = FoodSpawner(grid, rng=np.random.default_rng(1))
        for _ in range(10):
            assert spawner.spawn() == (2, 3)

    def test_full_board_still_places_food(self):
        grid = Grid(tile_count=4)
        grid.paint([[(x, y) for y in range(4) for x in range(4)]])
        spawner = FoodSpawner(grid, rng=np.random.default_rng(2))
        x, y = spawner.spawn()
        assert grid.in_bounds(x, y)

    def test_spawn_deterministic(self):
        a = FoodSpawner(Grid(), rng=np.random.default_rng(42))
        b = FoodSpawner(Grid(), rng=np.random.default_rng(42))
        assert [a.spawn() for _ in range(5)] == [b.spawn() for _ in range(5)]

    def test_eaten_at(self):
        spawner = FoodSpawner(Grid(tile_count=5))
        spawner.position = (1, 2)
        assert spawner.eaten_at((1, 2))
        assert not spawner.eaten_at((2, 1))
